"""
Template registry

Templates are produced by the authoring tool as ``<name>.png`` files with an
optional ``<name>.yaml`` sidecar holding match metadata::

    threshold: 0.9
    size_tolerance: 0.1
    search_zone: [0, 0, 800, 600]

The engine only reads templates; it never creates or mutates them.
"""
from __future__ import annotations

from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple

import yaml
from pydantic import BaseModel, Field, ValidationError

from ...core.logger import logger
from ..vision.template import Template
from ..vision.utils import ImageLike, load_image
from ..vision.zone import Zone

IMAGE_SUFFIXES = (".png", ".jpg", ".jpeg", ".bmp")


class UnknownTemplateError(KeyError):
    """A verb referenced a template name the registry does not hold."""


class TemplateMeta(BaseModel):
    """Sidecar metadata schema."""

    threshold: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    size_tolerance: float = Field(default=0.0, ge=0.0, lt=1.0)
    search_zone: Optional[Tuple[int, int, int, int]] = None


class TemplateRegistry:
    def __init__(self) -> None:
        self._templates: Dict[str, Template] = {}
        self._log = logger.bind(module="TemplateRegistry")

    def register(self, template: Template) -> None:
        if template.name in self._templates:
            self._log.warning("Template {} re-registered, replacing previous image", template.name)
        self._templates[template.name] = template

    def add(
        self,
        name: str,
        image: ImageLike,
        *,
        threshold: Optional[float] = None,
        size_tolerance: float = 0.0,
        search_zone: Optional[Zone] = None,
    ) -> Template:
        tpl = Template(
            name=name,
            image=load_image(image),
            threshold=threshold,
            size_tolerance=size_tolerance,
            search_zone=search_zone,
        )
        self.register(tpl)
        return tpl

    def get(self, name: str) -> Template:
        try:
            return self._templates[name]
        except KeyError:
            raise UnknownTemplateError(name) from None

    def names(self) -> List[str]:
        return sorted(self._templates)

    def __contains__(self, name: object) -> bool:
        return name in self._templates

    def __iter__(self) -> Iterator[Template]:
        return iter(self._templates.values())

    def __len__(self) -> int:
        return len(self._templates)

    def load_dir(self, directory: str | Path) -> int:
        """Load every image in ``directory`` (non-recursive). Returns the count loaded."""
        base = Path(directory)
        if not base.is_dir():
            self._log.warning("Template directory not found: {}", base)
            return 0

        loaded = 0
        for path in sorted(base.iterdir()):
            if path.suffix.lower() not in IMAGE_SUFFIXES:
                continue
            meta = self._load_meta(path.with_suffix(".yaml"))
            zone = Zone(*meta.search_zone) if meta.search_zone else None
            self.add(
                path.stem,
                str(path),
                threshold=meta.threshold,
                size_tolerance=meta.size_tolerance,
                search_zone=zone,
            )
            loaded += 1
        self._log.info("Loaded {} templates from {}", loaded, base)
        return loaded

    def _load_meta(self, path: Path) -> TemplateMeta:
        if not path.exists():
            return TemplateMeta()
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
        try:
            return TemplateMeta.model_validate(raw)
        except ValidationError as e:
            raise ValueError(f"Invalid template metadata {path}: {e}") from e


__all__ = ["UnknownTemplateError", "TemplateMeta", "TemplateRegistry"]
