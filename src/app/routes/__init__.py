"""
FastAPI Routes.

API 라우트 (REST). 화면 렌더링은 외부 presentation 담당.
"""

from . import apps

__all__ = ["apps"]
