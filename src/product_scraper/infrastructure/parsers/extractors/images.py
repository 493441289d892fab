# 🖼️ product_scraper/infrastructure/parsers/extractors/images.py
"""
🖼️ Екстрактори головного зображення товару з DOM.

🔹 CSS-селектори галерей: атрибути src/data-* з відсіюванням плейсхолдерів.
🔹 `srcset`/`data-srcset`: обирається варіант із найбільшою заявленою шириною.
🔹 Останній шанс — перший «змістовний» `<img>` сторінки (без лого/іконок/банерів, ≥200px або без розміру).
"""

from __future__ import annotations

# 🔠 Системні імпорти
import re	# 🧵 Парсинг дескрипторів srcset
from typing import Callable, List, Optional, Sequence, Tuple	# 🧰 Типізація

# 🧩 Внутрішні модулі проєкту
from product_scraper.infrastructure.parsers.document import Document
from .base import Extractor, Selectors, css_chain, logger

_DESCRIPTOR_RE = re.compile(r"^(\d+)")	# 📏 «800w» / «2x» → число


# ================================
# 🛠️ ДОПОМІЖНІ ФУНКЦІЇ
# ================================
def _is_usable(src: str, markers: Sequence[str]) -> bool:
    """Відкидає inline-дані та плейсхолдери."""
    lowered = src.lower()
    return not lowered.startswith("data:") and not any(marker in lowered for marker in markers)


def _to_int(raw: Optional[str]) -> int:
    """`parseInt`-подібна конверсія: ведучі цифри або 0."""
    match = _DESCRIPTOR_RE.match((raw or "").strip())
    return int(match.group(1)) if match else 0


def largest_from_srcset(srcset: Optional[str], markers: Sequence[str] = ("placeholder",)) -> Optional[str]:
    """
    URL з найбільшою заявленою шириною в `srcset`.

    Кандидати без дескриптора мають вагу 0; при рівності зберігається порядок документа.
    """
    best: Optional[Tuple[int, str]] = None
    for entry in (srcset or "").split(","):
        parts = entry.strip().split()
        if not parts:
            continue
        url = parts[0]
        if not _is_usable(url, markers):
            continue
        width = _to_int(parts[1]) if len(parts) > 1 else 0
        if best is None or width > best[0]:
            best = (width, url)
    return best[1] if best else None


# ================================
# 🧩 ЕКСТРАКТОРИ
# ================================
def image_css_chain(rules: Selectors) -> List[Extractor]:
    """Для кожного селектора галереї: src-атрибути, потім srcset."""
    attrs = tuple(rules.IMAGE_ATTRS)
    srcset_attrs = tuple(rules.SRCSET_ATTRS)
    markers = tuple(rules.IMAGE_PLACEHOLDER_MARKERS)

    def _read(document: Document, selector: str) -> Optional[str]:
        node = document.select_one(selector)
        if node is None:
            return None
        for name in attrs:
            src = Document.node_attr(node, name)
            if src and _is_usable(src, markers):
                return src
        return largest_from_srcset(Document.node_attr(node, *srcset_attrs))

    return css_chain(rules.IMAGE_CSS, _read)


def image_scan(rules: Selectors) -> Extractor:
    """Останній шанс: перший `<img>`, що не схожий на лого/іконку і достатньо великий."""
    blocklist = tuple(rules.IMAGE_SCAN_BLOCKLIST)
    min_size = rules.IMAGE_SCAN_MIN_SIZE

    def image_scan(document: Document) -> Optional[str]:
        for node in document.images():
            src = Document.node_attr(node, "src", "data-src")
            if not src or not _is_usable(src, blocklist):
                continue
            width = _to_int(Document.node_attr(node, "width"))
            height = _to_int(Document.node_attr(node, "height"))
            if width >= min_size or height >= min_size or (not width and not height):
                logger.debug("🖼️ Скан <img>: обрано %s (%sx%s)", src, width, height)
                return src
        return None

    return image_scan


def image_dom_chain(rules: Selectors) -> List[Callable[[Document], Optional[str]]]:
    """Повний DOM-ланцюжок: галереї → скан усіх `<img>`."""
    return [*image_css_chain(rules), image_scan(rules)]


__all__ = ["largest_from_srcset", "image_css_chain", "image_scan", "image_dom_chain"]
