from __future__ import annotations
from typing import Dict, Iterable, List

from sqlalchemy import Column, Integer, String, func, select, create_engine
from sqlalchemy.orm import declarative_base, Session

from domain.dtos import CaptionTemplate
from domain.enums import CaptionCategory

Base = declarative_base()

class CaptionRow(Base):
    __tablename__ = 'captions'
    id = Column(Integer, primary_key=True)
    category = Column(String, index=True)
    top_text = Column(String)
    bottom_text = Column(String)

class CaptionRepository:
    """Caption templates only. Generated images are never stored."""

    def __init__(self, db_url: str) -> None:
        self.engine = create_engine(db_url, future=True)
        Base.metadata.create_all(self.engine)

    def add(self, template: CaptionTemplate) -> None:
        if template.category == CaptionCategory.custom:
            raise ValueError("custom captions are not part of the catalog")
        with Session(self.engine) as s:
            s.add(self._to_row(template))
            s.commit()

    def seed(self, templates: Iterable[CaptionTemplate]) -> int:
        """Insert ``templates`` only into an empty table. Returns rows added."""
        with Session(self.engine) as s:
            if s.scalar(select(func.count()).select_from(CaptionRow)):
                return 0
            rows = [self._to_row(t) for t in templates]
            s.add_all(rows)
            s.commit()
            return len(rows)

    def all(self) -> List[CaptionTemplate]:
        with Session(self.engine) as s:
            rows = s.scalars(select(CaptionRow).order_by(CaptionRow.id)).all()
            return [self._from_row(r) for r in rows]

    def all_by_category(self, category: CaptionCategory) -> List[CaptionTemplate]:
        with Session(self.engine) as s:
            rows = s.scalars(select(CaptionRow).where(CaptionRow.category == category.value)
                             .order_by(CaptionRow.id)).all()
            return [self._from_row(r) for r in rows]

    def count_by_category(self) -> Dict[str, int]:
        with Session(self.engine) as s:
            out: Dict[str, int] = {c.value: 0 for c in CaptionCategory if c != CaptionCategory.custom}
            for cat, n in s.execute(select(CaptionRow.category, func.count()).group_by(CaptionRow.category)):
                out[cat] = n
            return out

    @staticmethod
    def _to_row(t: CaptionTemplate) -> CaptionRow:
        return CaptionRow(category=t.category.value, top_text=t.top_text, bottom_text=t.bottom_text)

    @staticmethod
    def _from_row(r: CaptionRow) -> CaptionTemplate:
        return CaptionTemplate(top_text=r.top_text, bottom_text=r.bottom_text,
                               category=CaptionCategory(r.category))
