"""Read-only access to ``user.config`` settings documents.

Layout written by the settings platform::

    <configuration>
      <userSettings>
        <MyApp.Properties.Settings>
          <setting name="WindowWidth" serializeAs="String">
            <value>800</value>
          </setting>
        </MyApp.Properties.Settings>
      </userSettings>
    </configuration>

Files are never written back.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path

from ucmigrate.domain.errors import MalformedDocumentError, SettingsFileNotFoundError

logger = logging.getLogger(__name__)

SETTING_XPATH = ".//userSettings/*/setting"


@dataclass(frozen=True)
class RawSetting:
    """One ``<setting>`` entry before type coercion.

    ``name`` is None when the element has no usable ``name`` attribute;
    ``value`` is None when there is no ``<value>`` child.
    """

    name: str | None
    value: str | None
    markup: str


def _element_markup(element: ET.Element) -> str:
    return ET.tostring(element, encoding="unicode").strip()


def read_raw_settings(path: Path) -> list[RawSetting]:
    """Parse *path* and return its setting entries in document order.

    Raises:
        SettingsFileNotFoundError: *path* does not exist.
        MalformedDocumentError: *path* is not well-formed XML.
    """
    if not path.is_file():
        msg = f"{str(path)!r} file does not exist"
        raise SettingsFileNotFoundError(msg)

    try:
        tree = ET.parse(path)
    except (ET.ParseError, UnicodeDecodeError) as exc:
        msg = f"{str(path)!r} XML file load failure: {exc}"
        raise MalformedDocumentError(msg) from exc

    root = tree.getroot()
    if root.tag == "userSettings":
        elements = root.findall("./*/setting")
    else:
        elements = root.findall(SETTING_XPATH)

    settings: list[RawSetting] = []
    for element in elements:
        name = element.get("name") or None
        value_node = element.find("value")
        value = None
        if value_node is not None:
            # Inner text: concatenated text of the node and all descendants.
            value = "".join(value_node.itertext())
        settings.append(RawSetting(name=name, value=value, markup=_element_markup(element)))

    logger.debug("Read %d setting entries from %s", len(settings), path)
    return settings
