#!/usr/bin/env python3
"""Вывести меню с бэкенда кафе, разложенное по разделам."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from cafe_api import CafeAPIClient, CafeAPIError  # noqa: E402
from menu import Category, format_price, normalize_products, organize_by_category  # noqa: E402


def print_section(category: Category, products: list) -> None:
    print(f"\n== {category.label} ({len(products)})")
    for product in products:
        flags = []
        caps = product.capabilities
        if caps.requires_milk_choice:
            flags.append("leche")
        if caps.requires_extras_choice:
            flags.append("extras")
        if caps.requires_protein_choice:
            flags.append("scoop")
        suffix = f" [{', '.join(flags)}]" if flags else ""
        if product.needs_manual_pricing:
            price = "Consultar precio"
        elif product.size2 and product.price2:
            price = (
                f"{product.size or 'M'} {format_price(product.price)} / "
                f"{product.size2} {format_price(product.price2)}"
            )
        else:
            price = format_price(product.price)
        print(f"  [{product.id}] {product.name}: {price}{suffix}")
        if product.description:
            print(f"      {product.description}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Вывести меню кафе по разделам")
    parser.add_argument(
        "--dump",
        type=Path,
        help="Сохранить сырой ответ /productos/ver_productos в JSON-файл",
    )
    args = parser.parse_args()

    load_dotenv(ROOT_DIR / ".env")
    client = CafeAPIClient.from_env()
    try:
        rows = client.get_products()
    except CafeAPIError as exc:
        print(f"❌ Ошибка API кафе: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if args.dump:
        args.dump.write_text(json.dumps(rows, ensure_ascii=False, indent=2), encoding="utf-8")
        print(f"📄 Сырой ответ сохранён в: {args.dump}")

    products = normalize_products(rows, image_base_url=client.base_url)
    print(f"✅ Активных продуктов: {len(products)} из {len(rows)}")

    for category, items in organize_by_category(products).items():
        if items:
            print_section(category, items)


if __name__ == "__main__":
    main()
