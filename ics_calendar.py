"""
A VCALENDAR under construction.

Blocks are kept in insertion order between the BEGIN:VCALENDAR and
END:VCALENDAR lines and joined with CRLF on output.
"""

CRLF = "\r\n"

CALENDAR_ID = "B1A7168E-065A-42D1-9E20-31F2E90FBDB1"
CALENDAR_NAME = "Swift Evolution"
CALENDAR_COLOR = "#F05138"


class ICalendar:

    def __init__(self, name: str = CALENDAR_NAME, color: str = CALENDAR_COLOR):
        self._components = ["BEGIN:VCALENDAR", "END:VCALENDAR"]
        self.event_count = 0
        # VCALENDAR must have VERSION and PRODID.
        self.insert("\n".join([
            "VERSION:2.0",
            f"PRODID:{CALENDAR_ID}",
            f"X-APPLE-CALENDAR-COLOR:{color}",
            f"X-WR-CALNAME:{name}",
            f"NAME:{name}",
        ]))

    def insert(self, component: str) -> None:
        """
        Insert a block just before END:VCALENDAR, converting LF to CRLF.

        TEXT property values must already be escaped and folded.
        """
        component = CRLF.join(component.split("\n"))
        if component.startswith("BEGIN:VEVENT"):
            self.event_count += 1
        self._components.insert(len(self._components) - 1, component)

    def serialize(self, debug: bool = False) -> str:
        """Join all blocks; `debug` puts a blank line between them."""
        separator = CRLF + CRLF if debug else CRLF
        return separator.join(self._components)

    def __str__(self) -> str:
        return self.serialize()

    def __repr__(self) -> str:
        return f"<ICalendar events={self.event_count}>"
