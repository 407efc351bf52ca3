#!/usr/bin/env python3
"""
Show a shared cart as a categorized checklist.

Usage:
    python scripts/show_cart.py <share-link-or-id> [--refresh] [--view all|hide|collapse]
    python scripts/show_cart.py <share-link-or-id> --explain

Example:
    python scripts/show_cart.py https://share-a-cart.com/get/T4GEU --view hide
"""
import argparse
import asyncio
import os
import sys

# Add parent directory to path so we can import modules
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from shoplist.common.errors import ShoplistError
from shoplist.common.logging_setup import configure_logging
from shoplist.common.schemas.cart import CompletedView
from shoplist.domain.cart.display import build_sections, checked_count, selected_total
from shoplist.domain.cart.service import CartService
from shoplist.domain.categorization.matcher import category_matcher


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Show a share-a-cart cart as a checklist")
    parser.add_argument("cart", help="share-a-cart link or cart ID")
    parser.add_argument("--refresh", action="store_true", help="re-fetch even if a saved state exists")
    parser.add_argument("--view", choices=[v.value for v in CompletedView],
                        help="how to show checked items (saved with the cart)")
    parser.add_argument("--explain", action="store_true", help="print category scores per item")
    return parser.parse_args(argv)


async def main(argv=None) -> int:
    args = parse_args(argv)
    configure_logging()

    service = CartService.from_settings()
    try:
        cart_id = service.resolve_cart_id(args.cart)
        state = await service.load(cart_id, force_refresh=args.refresh)
    except ShoplistError as e:
        print(f"❌ {e}")
        return 1

    if args.view:
        state = service.set_completed_view(cart_id, state, CompletedView(args.view))

    cart = state.cart
    print('=' * 80)
    print(f"{cart.title or 'Shopping List'}  [{cart_id}]")
    print(f"{cart.vendor_display_name or cart.vendor or 'Unknown vendor'} · {len(cart.items)} items")
    if cart.cart_total_price:
        print(f"Original total: {cart.cart_ccys}{cart.cart_total_price}")
    done = checked_count(state)
    if done:
        print(f"Selected ({done} items): {cart.cart_ccys}{selected_total(state)}")
    print('=' * 80)

    for section in build_sections(state):
        print(f"\n{section.category.name} ({section.item_count})")
        for row in section.active:
            mark = "x" if row.checked else " "
            if row.thin:
                print(f"  [{mark}] {row.item.title}")
            else:
                print(f"  [{mark}] {row.item.title}  ×{row.quantity}  {row.item.ccy_s}{row.item.price}")
            if args.explain:
                result = category_matcher.explain(row.item.title)
                hits = [c for c in result.candidates if c.score]
                print(f"        → {result.category_id} score={result.score} "
                      + ", ".join(f"{c.category_id}:{c.score}" for c in hits))
        if section.completed:
            print(f"  ── completed ({len(section.completed)})")
            for row in section.completed:
                print(f"  [x] {row.item.title}")

    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
