"""
Institution Registry

Manages loading and detection of institution layouts from JSON configuration files.
"""
import os
import re
import json
from typing import List, Optional

from statement_import.common.logging_config import get_logger
from ..exceptions import LayoutConfigError
from .layout import InstitutionConfig

logger = get_logger(__name__)


class InstitutionRegistry:
    """
    Registry for institution layouts.

    Loads layout configurations from JSON files and provides
    automatic detection based on document text content.
    """

    def __init__(self, layouts_dir: Optional[str] = None):
        """
        Initialize registry with path to layouts directory.

        Args:
            layouts_dir: Path to directory containing .json layout files.
                         None starts an empty registry (see register()).
        """
        self.layouts_dir = layouts_dir
        self.layouts: List[InstitutionConfig] = []
        if layouts_dir:
            self._load_layouts()

    def _load_layouts(self) -> None:
        """Scans the directory and loads all .json layouts, in file name order."""
        if not os.path.exists(self.layouts_dir):
            logger.warning(f"Layouts directory not found: {self.layouts_dir}")
            return

        for fname in sorted(os.listdir(self.layouts_dir)):
            if fname.endswith(".json"):
                fpath = os.path.join(self.layouts_dir, fname)
                try:
                    with open(fpath, 'r', encoding='utf-8') as f:
                        data = json.load(f)
                    self.register(self._parse_layout(data))
                    logger.debug(f"Loaded layout: {fname}", layout_file=fname)
                except (OSError, json.JSONDecodeError, LayoutConfigError) as e:
                    logger.error(f"Error loading layout {fname}: {e}", layout_file=fname)

    def _parse_layout(self, data: dict) -> InstitutionConfig:
        """Converts dict to InstitutionConfig object."""
        return InstitutionConfig.from_dict(data)

    def register(self, config: InstitutionConfig) -> None:
        if self.get(config.institution) is not None:
            raise LayoutConfigError(f"Institution already registered: {config.institution}")
        self.layouts.append(config)

    def detect(self, text: str) -> Optional[InstitutionConfig]:
        """
        Detect the institution for the given document text.

        A layout with keywords matches when all of them appear in the text;
        a layout without keywords matches when one of its document types does.

        Returns:
            First matching InstitutionConfig, or None if no match
        """
        for layout in self.layouts:
            if layout.keywords:
                found = all(k in text for k in layout.keywords)
            else:
                found = any(re.search(d.pattern, text, re.MULTILINE) for d in layout.document_types)
            if found:
                logger.debug(f"Detected institution: {layout.name}", institution=layout.institution)
                return layout
        return None

    def get(self, institution: str) -> Optional[InstitutionConfig]:
        """Get layout by institution identifier."""
        for layout in self.layouts:
            if layout.institution == institution:
                return layout
        return None

    def list_layouts(self) -> List[str]:
        """List all available institution identifiers."""
        return [l.institution for l in self.layouts]
