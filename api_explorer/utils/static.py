"""Static file serving with ordered override directories."""

from __future__ import annotations

import os
from typing import List, Sequence

from starlette.staticfiles import StaticFiles

from api_explorer.utils.logger import logger

PUBLIC_ROOT = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "public")


class LayeredStaticFiles(StaticFiles):
    """``StaticFiles`` that searches several directories, first hit wins.

    Override directories are consulted before ``PUBLIC_ROOT`` so a custom
    ``index.html`` or ``swagger-ui.js`` replaces the bundled one.
    """

    def __init__(self, directories: Sequence[str], *, html: bool = True, check_dir: bool = True) -> None:
        directories = list(directories)
        if not directories:
            raise ValueError("LayeredStaticFiles needs at least one directory")
        super().__init__(directory=directories[0], html=html, check_dir=check_dir)
        self.all_directories = list(directories)
        if check_dir:
            for directory in directories[1:]:
                if not os.path.isdir(directory):
                    raise RuntimeError(f"Directory '{directory}' does not exist")

    @classmethod
    def for_ui(cls, ui_dirs: Sequence[str]) -> "LayeredStaticFiles":
        """Layer ``ui_dirs`` over the bundled UI; missing override dirs are skipped."""
        layers: List[str] = []
        for directory in ui_dirs:
            if os.path.isdir(directory):
                layers.append(directory)
            else:
                logger.warning("explorer.ui_dir_missing", extra={"ui_dir": directory})
        layers.append(PUBLIC_ROOT)
        return cls(layers)
