"""
File boundaries: catalog sheets in, listing packs and task boards out.
"""

from commerce_desk.io.sheets import (
    listing_pack_filename,
    read_catalog_sheet,
    write_all_listing_packs,
    write_listing_pack,
)
from commerce_desk.io.task_store import load_tasks, save_tasks

__all__ = [
    "read_catalog_sheet",
    "write_listing_pack",
    "write_all_listing_packs",
    "listing_pack_filename",
    "load_tasks",
    "save_tasks",
]
