"""
Store layer: 템플릿 레코드 영속화.

- base.py: TemplateStore 추상 인터페이스
- mongo.py: MongoDB 구현
"""

from .base import TemplateStore
from .mongo import MongoTemplateStore

__all__ = [
    "TemplateStore",
    "MongoTemplateStore",
]
