"""Serialization of the current scene to a downloadable SVG file.

Export never raises. When there is nothing to export (the canvas has not been
rendered yet, or the scene holds no ``<svg>`` element) the failure is logged
on this module's logger and ``None`` is returned; the rest of the widget keeps
working.
"""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union
import xml.etree.ElementTree as ET

from .scene import SVG_NS

__all__ = ["SVG_FILENAME", "SVG_MIME_TYPE", "SvgExport", "export_svg", "save_svg"]

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

SVG_FILENAME = "graph.svg"
SVG_MIME_TYPE = "image/svg+xml"

ET.register_namespace("", SVG_NS)


@dataclass(frozen=True)
class SvgExport:
    """A serialized scene ready to be offered as a file.

    Parameters
    ----------
    data : str
        Standalone SVG document.
    filename : str
        Suggested download name.
    mime_type : str
        Media type of ``data``.
    """

    data: str
    filename: str = SVG_FILENAME
    mime_type: str = SVG_MIME_TYPE

    def to_message(self) -> dict:
        """Return the custom-message payload the frontend turns into a download."""
        return {
            "type": "download",
            "filename": self.filename,
            "mime_type": f"{self.mime_type};charset=utf-8",
            "data_b64": base64.b64encode(self.data.encode("utf-8")).decode("ascii"),
        }

    def write(self, path: Union[str, Path]) -> Path:
        target = Path(path)
        if target.is_dir():
            target = target / self.filename
        target.write_text(self.data, encoding="utf-8")
        return target


def _is_svg(el: ET.Element) -> bool:
    return el.tag == "svg" or el.tag == f"{{{SVG_NS}}}svg"


def export_svg(scene: Optional[str]) -> Optional[SvgExport]:
    """Serialize ``scene`` for download.

    Parameters
    ----------
    scene : str or None
        Rendered scene markup; ``None`` when no surface is mounted.

    Returns
    -------
    SvgExport or None
        ``None`` when there is no drawable scene; the reason is logged.
    """
    if not scene:
        logger.error("Canvas is not available.")
        return None

    try:
        root = ET.fromstring(scene)
    except ET.ParseError as e:
        logger.error("Canvas markup could not be parsed: %s", e)
        return None

    svg = root if _is_svg(root) else next((el for el in root.iter() if _is_svg(el)), None)
    if svg is None:
        logger.error("SVG element not found within canvas.")
        return None

    return SvgExport(data=ET.tostring(svg, encoding="unicode"))


def save_svg(scene: Optional[str], path: Union[str, Path]) -> Optional[Path]:
    """Export ``scene`` and write it to ``path`` (a file, or a directory for ``graph.svg``)."""
    exported = export_svg(scene)
    if exported is None:
        return None
    try:
        return exported.write(path)
    except OSError as e:
        logger.error("Could not write %s: %s", path, e)
        return None
