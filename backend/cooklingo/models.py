from __future__ import annotations
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, Text
from .db import Base


class Word(Base):
	__tablename__ = "words"
	id = Column(Integer, primary_key=True, autoincrement=True)
	# Upserts are keyed on the word text
	word = Column(String(128), unique=True, index=True, nullable=False)
	translation = Column(String(256), nullable=False, default="")
	# Learner-facing scoring attributes; their sum is the difficulty score
	recognition = Column(Integer, default=0, nullable=False)
	frequency = Column(Integer, default=0, nullable=False)
	simplicity = Column(Integer, default=0, nullable=False)
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Recipe(Base):
	__tablename__ = "recipes"
	id = Column(Integer, primary_key=True, autoincrement=True)
	recipe_text = Column(Text, nullable=False)  # JSON string snapshot
	created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
