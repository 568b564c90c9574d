from pydantic import BaseModel, ConfigDict, Field, field_validator

from guide_core.services.guide_types import Channel, GuideGrid, GuideRow, Programme, TimeWindow
from guide_core.utils.timezone import convert_to_timezone, resolve_timezone


def _validate_timezone_name(v: str) -> str:
    try:
        resolve_timezone(v)
    except ValueError:
        raise ValueError(f"Invalid timezone: {v}. Must be a valid IANA timezone (e.g., 'Europe/London', 'America/New_York') or 'UTC'")
    return v


class ChannelRecord(BaseModel):
    """Channel entry supplied by the playlist collaborator"""
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    stable_id: str | None = Field(None, alias="stableId", description="External identifier, e.g. tvg-id")
    display_name: str = Field(..., alias="displayName", min_length=1, description="Channel name shown to users")
    group_name: str | None = Field(None, alias="groupName", description="Playlist group title")
    logo_url: str | None = Field(None, alias="logoUrl", description="URL to channel logo")
    stream_url: str = Field("", alias="streamUrl", description="Playable stream URL")

    @field_validator('stable_id', 'group_name', 'logo_url', mode='after')
    @classmethod
    def blank_to_none(cls, v: str | None) -> str | None:
        """Treat empty optional attributes as absent"""
        return v or None

    def to_channel(self) -> Channel:
        return Channel(
            display_name=self.display_name,
            stream_url=self.stream_url,
            stable_id=self.stable_id,
            group_name=self.group_name,
            logo_url=self.logo_url,
        )


class ChannelResponse(BaseModel):
    """Channel data for renderers"""
    stable_id: str | None
    display_name: str
    group_name: str | None
    logo_url: str | None
    stream_url: str

    @classmethod
    def from_channel(cls, channel: Channel) -> "ChannelResponse":
        return cls(
            stable_id=channel.stable_id,
            display_name=channel.display_name,
            group_name=channel.group_name,
            logo_url=channel.logo_url,
            stream_url=channel.stream_url,
        )


class ProgrammeResponse(BaseModel):
    """Single programme with timestamps in the requested timezone"""
    title: str
    subtitle: str | None = None
    description: str | None = None
    rating: str | None = None
    season: int | None = None
    episode: int | None = None
    start_time: str = Field(..., description="ISO8601 start time in the response timezone")
    stop_time: str = Field(..., description="ISO8601 stop time in the response timezone")
    icon: str | None = None
    channel_key: str = Field(..., description="Feed channel identifier")

    @classmethod
    def from_programme(cls, programme: Programme, timezone_str: str = "UTC") -> "ProgrammeResponse":
        return cls(
            title=programme.title,
            subtitle=programme.subtitle,
            description=programme.description,
            rating=programme.rating,
            season=programme.season,
            episode=programme.episode,
            start_time=convert_to_timezone(programme.start, timezone_str),
            stop_time=convert_to_timezone(programme.end, timezone_str),
            icon=programme.icon,
            channel_key=programme.source_channel_key,
        )


class TimeWindowSnapshot(BaseModel):
    """Visible time range for the timeline header"""
    start: str
    end: str
    slot_minutes: int
    visible_slots: int
    timezone: str = Field(default="UTC", description="Timezone used for all timestamps")
    slot_starts: list[str] = Field(default_factory=list)

    @field_validator('timezone')
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        return _validate_timezone_name(v)

    @classmethod
    def from_window(cls, window: TimeWindow, timezone_str: str = "UTC") -> "TimeWindowSnapshot":
        return cls(
            start=convert_to_timezone(window.start, timezone_str),
            end=convert_to_timezone(window.end, timezone_str),
            slot_minutes=window.slot_minutes,
            visible_slots=window.visible_slots,
            timezone=timezone_str,
            slot_starts=[convert_to_timezone(slot_start, timezone_str) for slot_start, _ in window.slot_bounds()],
        )


class GridCellResponse(BaseModel):
    column: int
    col_start: int
    col_end: int
    programme: ProgrammeResponse


class GuideRowResponse(BaseModel):
    channel: ChannelResponse
    has_schedule: bool
    cells: list[GridCellResponse | None]

    @classmethod
    def from_row(cls, row: GuideRow, timezone_str: str = "UTC") -> "GuideRowResponse":
        cells: list[GridCellResponse | None] = []
        for cell in row.cells:
            if cell is None:
                cells.append(None)
                continue
            cells.append(GridCellResponse(
                column=cell.column,
                col_start=cell.col_start,
                col_end=cell.col_end,
                programme=ProgrammeResponse.from_programme(cell.programme, timezone_str),
            ))
        return cls(
            channel=ChannelResponse.from_channel(row.channel),
            has_schedule=row.has_schedule,
            cells=cells,
        )


class GuideGridResponse(BaseModel):
    """Guide grid rendered for a display timezone"""
    window: TimeWindowSnapshot
    rows: list[GuideRowResponse]

    @classmethod
    def from_grid(cls, grid: GuideGrid, timezone_str: str = "UTC") -> "GuideGridResponse":
        return cls(
            window=TimeWindowSnapshot.from_window(grid.window, timezone_str),
            rows=[GuideRowResponse.from_row(row, timezone_str) for row in grid.rows],
        )
