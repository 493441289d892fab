# 🥣 product_scraper/infrastructure/parsers/document.py
"""
🥣 Document — тонка обгортка над BeautifulSoup для екстракторів.

🔹 Толерантний до зламаної розмітки (бекенд `lxml` за замовчуванням).
🔹 Надає CSS-вибірку, читання атрибутів/тексту, meta-контенту та JSON-LD блоків.
🔹 Жоден метод не кидає винятків на кривому HTML чи невалідному селекторі.
"""

from __future__ import annotations

# 🌐 Зовнішні бібліотеки
from bs4 import BeautifulSoup	# 🥣 Парсимо HTML-документи
from bs4.element import Tag	# 🧱 Тип DOM-вузла

# 🔠 Системні імпорти
import logging	# 🧾 Логування подій
import re	# 🧵 Нормалізація пробілів
from typing import Any, Iterable, List, Optional	# 🧰 Типи для статичного аналізу

# 🧩 Внутрішні модулі проєкту
from product_scraper.infrastructure.parsers._infra_options import ALLOWED_HTML_PARSERS	# 🥣 Дозволені бекенди
from product_scraper.shared.utils.logger import LOG_NAME	# 🏷️ Базова назва логера

# ================================
# 🧾 ЛОГЕР
# ================================
logger = logging.getLogger(f"{LOG_NAME}.parser.document")

JSON_LD_SCRIPT = 'script[type="application/ld+json"]'	# 📄 Селектор JSON-LD блоків


# ================================
# 🛠️ ДОПОМІЖНІ ФУНКЦІЇ
# ================================
def norm_ws(text: Optional[str]) -> str:
    """Нормалізує пробіли у переданому рядку."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()	# 🧹 Стискаємо та обрізаємо пробіли


def attr_to_str(value: Any) -> str:
    """Повертає перше непорожнє текстове значення атрибута (bs4 віддає class як list)."""
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(str(v) for v in value if v)
    return str(value)


# ================================
# 🥣 DOCUMENT
# ================================
class Document:
    """Розібраний HTML-документ. Створюється на один виклик і не кешується."""

    __slots__ = ("soup",)

    def __init__(self, soup: BeautifulSoup) -> None:
        self.soup = soup

    @classmethod
    def parse(cls, html: Optional[str], parser: str = "lxml") -> "Document":
        """🥣 Будує документ; непідтримуваний бекенд → `lxml` з попередженням."""
        if parser not in ALLOWED_HTML_PARSERS:
            logger.warning("⚠️ Непідтримуваний html_parser=%r → fallback на lxml.", parser)
            parser = "lxml"
        soup = BeautifulSoup(html or "", parser)
        return cls(soup)

    # ================================
    # 🔍 ВИБІРКА
    # ================================
    def select(self, selector: str) -> List[Tag]:
        """Усі елементи за CSS-селектором; невалідний селектор → []."""
        try:
            return [el for el in self.soup.select(selector) if isinstance(el, Tag)]
        except (ValueError, NotImplementedError) as exc:	# 🧪 soupsieve: SelectorSyntaxError ⊂ ValueError
            logger.debug("🐛 Невалідний селектор %r: %s", selector, exc)
            return []

    def select_one(self, selector: str) -> Optional[Tag]:
        found = self.select(selector)
        return found[0] if found else None

    # ================================
    # 📖 ЧИТАННЯ ЗНАЧЕНЬ
    # ================================
    @staticmethod
    def node_attr(node: Tag, *names: str, raw: bool = False) -> Optional[str]:
        """Перше непорожнє значення з переліку атрибутів вузла (`raw` → без стискання пробілів)."""
        for name in names:
            value = attr_to_str(node.get(name))
            if not raw:
                value = norm_ws(value)
            if value.strip():
                return value
        return None

    @staticmethod
    def node_text(node: Tag) -> str:
        return norm_ws(node.get_text(" ", strip=True))

    def attr(self, selector: str, *names: str, raw: bool = False) -> Optional[str]:
        """Атрибут першого елемента, що збігся з селектором."""
        node = self.select_one(selector)
        return self.node_attr(node, *names, raw=raw) if node is not None else None

    def text(self, selector: str) -> Optional[str]:
        """Текст першого елемента за селектором (None, якщо елемента нема або він порожній)."""
        node = self.select_one(selector)
        if node is None:
            return None
        return self.node_text(node) or None

    def meta_content(self, selector: str, raw: bool = False) -> Optional[str]:
        """`content` першого meta-тегу за селектором."""
        return self.attr(selector, "content", raw=raw)

    def title_text(self) -> Optional[str]:
        """Текст елемента `<title>`."""
        return self.text("title")

    def json_ld_payloads(self) -> List[str]:
        """Сирий вміст усіх `<script type="application/ld+json">`."""
        payloads: List[str] = []
        for script in self.select(JSON_LD_SCRIPT):
            raw = (script.string or script.get_text() or "").strip()
            if raw:
                payloads.append(raw)
        return payloads

    def images(self) -> Iterable[Tag]:
        """Усі `<img>` у порядку документа."""
        return self.select("img")


__all__ = ["Document", "JSON_LD_SCRIPT", "norm_ws", "attr_to_str"]
