"""Shared module - 설정, 모델, 외부 클라이언트."""
