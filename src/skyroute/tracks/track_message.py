"""Track message model and its XML form.

A track message has a westbound and an eastbound section. Each section
carries the raw header and message text, the time it was last updated and
the parsed tracks. The XML form is used for the download feed and for the
on-disk cache:

    <Content>
      <TrackSystem>NATS</TrackSystem>
      <Westbound>
        <Header>...</Header>
        <LastUpdated>2026-10-18T10:00:00Z</LastUpdated>
        <Message>A PIKIL 56/20 57/30 HOIST ...</Message>
        <Tracks>
          <Track ident="A">
            <Waypoint>PIKIL</Waypoint>
            ...
          </Track>
        </Tracks>
      </Westbound>
      <Eastbound>...</Eastbound>
    </Content>

When <Tracks> is missing, tracks are parsed from <Message> with the
system's text parser.
"""

import xml.etree.ElementTree as ET
from dataclasses import dataclass, field

from skyroute.tracks.errors import TrackParseError
from skyroute.tracks.track_system import Track, TrackSystem, parse_tracks

WESTBOUND = "Westbound"
EASTBOUND = "Eastbound"


@dataclass
class IndividualTrackMessage:
    """One direction of a track message.

    Attributes:
        header: Free-text header of the message
        last_updated: Timestamp of the last update, as published
        message: Free-text track message
        tracks: Parsed tracks
    """

    header: str = ""
    last_updated: str = ""
    message: str = ""
    tracks: list[Track] = field(default_factory=list)

    @classmethod
    def from_element(cls, element: ET.Element, system: TrackSystem) -> "IndividualTrackMessage":
        """Build a section from its XML element.

        Raises:
            TrackParseError: If a track element has no identifier.
        """
        message = element.findtext("Message", default="")
        tracks_element = element.find("Tracks")

        if tracks_element is None:
            tracks = parse_tracks(system, message)
        else:
            tracks = []
            for track_element in tracks_element.findall("Track"):
                ident = track_element.get("ident")
                if not ident:
                    raise TrackParseError("Track element without ident attribute")
                waypoints = [(w.text or "").strip() for w in track_element.findall("Waypoint")]
                tracks.append(Track(ident, [w for w in waypoints if w]))

        return cls(
            header=element.findtext("Header", default=""),
            last_updated=element.findtext("LastUpdated", default=""),
            message=message,
            tracks=tracks,
        )

    def to_element(self, tag: str) -> ET.Element:
        element = ET.Element(tag)
        ET.SubElement(element, "Header").text = self.header
        ET.SubElement(element, "LastUpdated").text = self.last_updated
        ET.SubElement(element, "Message").text = self.message

        tracks_element = ET.SubElement(element, "Tracks")
        for track in self.tracks:
            track_element = ET.SubElement(tracks_element, "Track", ident=track.ident)
            for waypoint in track.waypoints:
                ET.SubElement(track_element, "Waypoint").text = waypoint
        return element


@dataclass
class TrackMessage:
    """Complete track message of one system.

    Attributes:
        system: Track system that published the message
        west: Westbound section
        east: Eastbound section

    Examples:
        >>> msg = TrackMessage.from_xml(xml_text)
        >>> TrackMessage.from_xml(msg.to_xml()) == msg
        True
    """

    system: TrackSystem
    west: IndividualTrackMessage
    east: IndividualTrackMessage

    @property
    def sections(self) -> list[IndividualTrackMessage]:
        return [self.west, self.east]

    def all_tracks(self) -> list[Track]:
        return self.west.tracks + self.east.tracks

    @classmethod
    def from_xml(cls, document: str | bytes) -> "TrackMessage":
        """Parse the XML form of a message.

        Raises:
            TrackParseError: If the document is not a valid track message.
        """
        try:
            root = ET.fromstring(document)
        except ET.ParseError as e:
            raise TrackParseError(f"Invalid track message XML: {e}") from e

        system_name = root.findtext("TrackSystem")
        if not system_name:
            raise TrackParseError("Track message has no TrackSystem element")
        try:
            system = TrackSystem.from_name(system_name)
        except ValueError as e:
            raise TrackParseError(str(e)) from e

        sections = {}
        for tag in (WESTBOUND, EASTBOUND):
            element = root.find(tag)
            if element is None:
                raise TrackParseError(f"Track message has no {tag} section")
            sections[tag] = IndividualTrackMessage.from_element(element, system)

        return cls(system, sections[WESTBOUND], sections[EASTBOUND])

    def to_xml(self) -> str:
        """Serialize to the XML form accepted by from_xml()."""
        root = ET.Element("Content")
        ET.SubElement(root, "TrackSystem").text = self.system.value
        root.append(self.west.to_element(WESTBOUND))
        root.append(self.east.to_element(EASTBOUND))
        ET.indent(root)
        return ET.tostring(root, encoding="unicode")

    def __str__(self) -> str:
        return (
            f"{self.west.header}"
            f"\n\nWestbound tracks ({self.west.last_updated}):\n\n{self.west.message}"
            f"\n\nEastbound tracks ({self.east.last_updated}):\n\n{self.east.message}"
        )
