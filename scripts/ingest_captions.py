# scripts/ingest_captions.py

from __future__ import annotations

import json
from pathlib import Path
import sys

# --- Добавляем корень проекта в sys.path, если скрипт запущен напрямую ---
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
# -------------------------------------------------------------------------

from config import Settings
from domain.captions import CATALOG
from domain.dtos import CaptionTemplate
from domain.enums import CaptionCategory
from services.caption_repository import CaptionRepository


def load_templates(path: Path) -> list[CaptionTemplate]:
    """[{"top_text": ..., "bottom_text": ..., "category": "tech"}, ...]"""
    data = json.loads(path.read_text(encoding="utf-8"))
    out = []
    for e in data:
        category = CaptionCategory(e.get("category", "generic"))
        if category == CaptionCategory.custom:
            raise ValueError(f"'custom' is not a catalog category: {e}")
        out.append(CaptionTemplate(top_text=e["top_text"], bottom_text=e["bottom_text"], category=category))
    return out


def ingest(path: Path | None = None) -> int:
    settings = Settings()
    repo = CaptionRepository(settings.db_url)
    count = repo.seed(CATALOG)

    # 1) Встроенный каталог, если таблица пустая; 2) файл с подписями
    if path is not None:
        for template in load_templates(path):
            repo.add(template)
            count += 1
    return count


if __name__ == "__main__":
    src = Path(sys.argv[1]) if len(sys.argv) > 1 else None
    n = ingest(src)
    print(f"Ingested {n} captions.")
