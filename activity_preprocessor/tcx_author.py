"""Decoder for the identity metadata stored in TCX files.

A TCX document names the software that wrote it in ``Author`` (an
``Application_t``) and the recording device in ``Creator`` (a ``Device_t``)::

    <Author xsi:type="Application_t">
      <Name>Garmin Connect</Name>
      <Build>
        <Version>
          <VersionMajor>20</VersionMajor>
          <VersionMinor>26</VersionMinor>
        </Version>
        <Type>Release</Type>
      </Build>
      <LangID>en</LangID>
      <PartNumber>006-D2449-00</PartNumber>
    </Author>

Any failure aborts decoding of the enclosing element and propagates to the
caller; partially decoded structures are never returned. Build types are
checked against the four values the schema allows (Internal, Alpha, Beta,
Release) rather than stored as free text; an unknown type is rejected as
malformed.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

from .errors import MalformedStructureError, NumericRangeError

XSI_TYPE = "{http://www.w3.org/2001/XMLSchema-instance}type"

Source = Union[str, bytes, ET.Element]


class BuildType(str, Enum):
    INTERNAL = "Internal"
    ALPHA = "Alpha"
    BETA = "Beta"
    RELEASE = "Release"


@dataclass(frozen=True)
class Version:
    version_major: int = 0
    version_minor: int = 0
    build_major: int = 0
    build_minor: int = 0


@dataclass(frozen=True)
class Build:
    type: Optional[BuildType] = None
    version: Optional[Version] = None


@dataclass(frozen=True)
class Application:
    name: str = ""
    build: Optional[Build] = None
    lang_id: str = ""
    part_number: str = ""


@dataclass(frozen=True)
class Device:
    name: str = ""
    unit_id: int = 0
    product_id: int = 0
    version: Optional[Version] = None


def _local_name(tag: str) -> str:
    return tag.rsplit("}", 1)[-1]


def _as_element(source: Source) -> ET.Element:
    if isinstance(source, ET.Element):
        return source
    try:
        return ET.fromstring(source)
    except ET.ParseError as exc:
        raise MalformedStructureError(f"invalid TCX XML: {exc}") from exc


def _children(element: ET.Element) -> dict[str, ET.Element]:
    # Later duplicates win, as a streaming decoder would overwrite them.
    return {_local_name(child.tag): child for child in element}


def _text(element: Optional[ET.Element]) -> str:
    if element is None or element.text is None:
        return ""
    return element.text.strip()


def _parse_uint(field: str, element: Optional[ET.Element], bits: int) -> int:
    if element is None:
        return 0
    text = _text(element)
    if not (text.isascii() and text.isdigit()):
        raise MalformedStructureError(f"{field} must be an unsigned integer, got {text!r}")
    value = int(text)
    if value >= 1 << bits:
        raise NumericRangeError(field, text, bits)
    return value


def parse_version(source: Source) -> Version:
    children = _children(_as_element(source))
    return Version(
        version_major=_parse_uint("VersionMajor", children.get("VersionMajor"), 16),
        version_minor=_parse_uint("VersionMinor", children.get("VersionMinor"), 16),
        build_major=_parse_uint("BuildMajor", children.get("BuildMajor"), 16),
        build_minor=_parse_uint("BuildMinor", children.get("BuildMinor"), 16),
    )


def parse_build(source: Source) -> Build:
    children = _children(_as_element(source))

    build_type: Optional[BuildType] = None
    if "Type" in children:
        raw_type = _text(children["Type"])
        try:
            build_type = BuildType(raw_type)
        except ValueError as exc:
            raise MalformedStructureError(f"unknown build type {raw_type!r}") from exc

    version = parse_version(children["Version"]) if "Version" in children else None
    return Build(type=build_type, version=version)


def parse_application(source: Source) -> Application:
    """Decode an ``Application_t`` element such as a TCX ``Author``."""

    children = _children(_as_element(source))
    build = parse_build(children["Build"]) if "Build" in children else None
    return Application(
        name=_text(children.get("Name")),
        build=build,
        lang_id=_text(children.get("LangID")),
        part_number=_text(children.get("PartNumber")),
    )


def parse_device(source: Source) -> Device:
    """Decode a ``Device_t`` element such as a TCX ``Creator``."""

    children = _children(_as_element(source))
    version = parse_version(children["Version"]) if "Version" in children else None
    return Device(
        name=_text(children.get("Name")),
        unit_id=_parse_uint("UnitId", children.get("UnitId"), 32),
        product_id=_parse_uint("ProductID", children.get("ProductID"), 16),
        version=version,
    )


def parse_author(source: Source) -> Union[Application, Device]:
    """Decode an ``Author`` or ``Creator`` element by its ``xsi:type``.

    Elements without a type attribute are decoded as applications.
    """

    element = _as_element(source)
    xsi_type = _local_name(element.get(XSI_TYPE, "Application_t")).split(":")[-1]
    if xsi_type == "Device_t":
        return parse_device(element)
    if xsi_type == "Application_t":
        return parse_application(element)
    raise MalformedStructureError(f"unexpected author type {xsi_type!r}")
