"""
Log Parser Module - Record normalization

Handles:
- JSON object and structured-header (key=value) detection
- Timestamp extraction from configured time fields
- Message assembly from configured message fields
- Meta field selection and deterministic field colors
- Fallback to an opaque message for anything unstructured
"""
import base64
import hashlib
import json
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional, Tuple

import http_sf

from logbin.session import SubscriptionConfig

# Epoch values below this are taken as seconds rather than milliseconds
# (1e11 ms is early 1973, 1e11 s is far in the future)
SECONDS_EPOCH_LIMIT = 1e11


def color_for_field(key: str, value: str) -> str:
    """Stable '#rrggbb' color for a (key, value) pair"""
    digest = hashlib.sha256(f"{key}={value}".encode("utf-8")).digest()
    return "#{:02x}{:02x}{:02x}".format(digest[0], digest[1], digest[2])


def relative_luminance(hex_color: str) -> float:
    """WCAG relative luminance of a '#rrggbb' color"""
    hex_color = hex_color.lstrip("#")
    channels = []
    for i in (0, 2, 4):
        c = int(hex_color[i:i + 2], 16) / 255.0
        channels.append(c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4)
    r, g, b = channels
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(color1: str, color2: str) -> float:
    """WCAG contrast ratio between two colors (1.0 to 21.0)"""
    l1 = relative_luminance(color1)
    l2 = relative_luminance(color2)
    lighter, darker = max(l1, l2), min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


def text_color_for(background: str) -> str:
    """Black or white, whichever reads better on the background"""
    if contrast_ratio(background, "#000000") >= contrast_ratio(background, "#ffffff"):
        return "#000000"
    return "#ffffff"


def format_time(epoch_ms: int) -> str:
    """Local wall-clock display string with millisecond precision"""
    return datetime.fromtimestamp(epoch_ms / 1000).strftime('%H:%M:%S.%f')[:-3]


@dataclass(frozen=True)
class FieldValue:
    """A meta field as displayed: its text and chip color"""
    value: str
    color: str

    @property
    def text_color(self) -> str:
        return text_color_for(self.color)


@dataclass(frozen=True)
class LogRecord:
    """One observed log line after normalization"""
    sequence: int
    raw: str
    time_string: str
    arrived_at: int
    time: Optional[int] = None
    message: Optional[str] = None
    fields: Dict[str, FieldValue] = field(default_factory=dict)
    parser: Optional[str] = None

    @property
    def effective_time(self) -> int:
        """Extracted time when available, otherwise arrival time"""
        return self.time if self.time is not None else self.arrived_at

    @property
    def is_structured(self) -> bool:
        return self.parser is not None


class LogRecordParser:
    """
    Normalizes raw log lines into LogRecords

    Supported structured formats:
    - JSON objects: '{"level": "info", "msg": "hello"}'
    - Structured headers: 'level=info, msg="hello"' or 'level=info; msg=hello'

    Anything else (including JSON arrays or scalars) is kept as an opaque
    message. Parsing never raises.
    """

    # Timestamp formats to try after ISO-8601
    TIMESTAMP_FORMATS = [
        '%Y-%m-%d %H:%M:%S',
        '%Y-%m-%d %H:%M:%S,%f',
        '%Y-%m-%dT%H:%M:%S.%f%z',
        '%d/%b/%Y:%H:%M:%S %z',  # Common log format
    ]

    def __init__(self, config: Optional[SubscriptionConfig] = None, clock=time.time):
        """
        Args:
            config: Message, meta and time key selection
            clock: Returns epoch seconds; used for arrival time when the
                transport did not stamp the record
        """
        self.config = config or SubscriptionConfig()
        self.clock = clock

    def parse_timestamp(self, value: Any) -> Optional[int]:
        """
        Interpret a field value as a timestamp

        Accepts numeric epochs (seconds or milliseconds, as numbers or
        digit strings) and ISO-8601 or common date text.

        Returns:
            Epoch milliseconds, or None if the value is not a timestamp
        """
        if isinstance(value, bool) or value is None:
            return None

        if isinstance(value, (int, float)):
            return self._epoch_to_ms(value)

        if not isinstance(value, str):
            return None

        text = value.strip()
        if not text:
            return None

        try:
            return self._epoch_to_ms(float(text))
        except ValueError:
            pass

        try:
            return int(datetime.fromisoformat(text).timestamp() * 1000)
        except (ValueError, OverflowError, OSError):
            pass

        for fmt in self.TIMESTAMP_FORMATS:
            try:
                return int(datetime.strptime(text, fmt).timestamp() * 1000)
            except (ValueError, OverflowError, OSError):
                continue

        return None

    @staticmethod
    def _epoch_to_ms(number: float) -> Optional[int]:
        if number != number or number in (float("inf"), float("-inf")):
            return None
        if abs(number) < SECONDS_EPOCH_LIMIT:
            return int(number * 1000)
        return int(number)

    @staticmethod
    def _stringify(value: Any) -> str:
        if isinstance(value, str):
            return value
        return json.dumps(value, separators=(',', ':'), ensure_ascii=False)

    def parse_json(self, raw: str) -> Optional[Dict[str, Any]]:
        """Return the object if raw is a JSON object, else None"""
        try:
            data = json.loads(raw)
        except (ValueError, RecursionError):
            return None
        return data if isinstance(data, dict) else None

    def parse_structured_headers(self, raw: str) -> Optional[Dict[str, str]]:
        """
        Return fields if raw reads as structured header members, else None

        Tried in order: a structured-field Dictionary (member parameters
        become extra fields), a List with some structure (members become
        item0, item1, ...), then the legacy 'key=value; key=value' form.
        """
        text = raw.strip()
        if not text:
            return None

        try:
            encoded = text.encode("ascii")
        except UnicodeEncodeError:
            encoded = None

        if encoded is not None:
            for parse in (self._sf_dictionary, self._sf_list):
                try:
                    result = parse(encoded)
                except ValueError:
                    continue
                if result:
                    return result

        return self._legacy_pairs(text)

    @classmethod
    def _sf_text(cls, value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, bytes):
            return base64.b64encode(value).decode("ascii")
        if isinstance(value, datetime):
            return str(int(value.timestamp()))
        if isinstance(value, list):
            # Inner list of (item, params)
            return ", ".join(cls._sf_text(item) for item, _params in value)
        return str(value)

    def _sf_dictionary(self, encoded: bytes) -> Dict[str, str]:
        result: Dict[str, str] = {}
        for key, (value, params) in http_sf.parse(encoded, tltype="dictionary").items():
            result[key] = self._sf_text(value)
            for param_key, param_value in params.items():
                result[param_key] = self._sf_text(param_value)
        return result

    def _sf_list(self, encoded: bytes) -> Dict[str, str]:
        members = http_sf.parse(encoded, tltype="list")
        has_structure = len(members) > 1 or any(
            params or isinstance(value, list) for value, params in members
        )
        if not has_structure:
            return {}
        return {f"item{idx}": self._sf_text(value) for idx, (value, _params) in enumerate(members)}

    @staticmethod
    def _legacy_pairs(text: str) -> Optional[Dict[str, str]]:
        if "=" not in text:
            return None

        result: Dict[str, str] = {}
        for pair in text.split(";"):
            key, sep, value = pair.partition("=")
            if not sep:
                continue
            value = value.strip()
            if len(value) >= 2 and value[0] == value[-1] and value[0] in ('"', "'"):
                value = value[1:-1]
            result[key.strip()] = value

        return result or None

    def _detect(self, raw: str) -> Tuple[Optional[str], Optional[Dict[str, Any]]]:
        data = self.parse_json(raw)
        if data is not None:
            return "json", data

        data = self.parse_structured_headers(raw)
        if data is not None:
            return "structuredHeaders", data

        return None, None

    def parse_line(self, raw: str, sequence: int, arrived_at: Optional[int] = None) -> LogRecord:
        """
        Normalize one raw record

        Args:
            raw: The record text exactly as received
            sequence: Arrival index assigned by the caller
            arrived_at: Epoch ms arrival stamp (defaults to now)

        Returns:
            LogRecord; unstructured input yields message == raw and no fields
        """
        if arrived_at is None:
            arrived_at = int(self.clock() * 1000)

        try:
            parser, data = self._detect(raw)
        except Exception:
            parser, data = None, None

        if data is None:
            return LogRecord(
                sequence=sequence,
                raw=raw,
                time_string=format_time(arrived_at),
                arrived_at=arrived_at,
                message=raw,
            )

        # Time: first configured key that is present, parseable and displayable wins
        record_time = None
        time_string = None
        for key in self.config.time_keys:
            if key not in data:
                continue
            candidate = self.parse_timestamp(data[key])
            if candidate is None:
                continue
            try:
                time_string = format_time(candidate)
            except (OverflowError, OSError, ValueError):
                continue
            record_time = candidate
            break

        # Message: configured keys in configured order, consumed from the fields
        working = {key: self._stringify(value) for key, value in data.items()}
        parts = []
        for key in self.config.msg_keys:
            if key in working:
                parts.append(working.pop(key))
        message = " ".join(parts) if parts else None

        if self.config.meta_keys:
            allowed = set(self.config.meta_keys)
            working = {key: value for key, value in working.items() if key in allowed}

        fields = {
            key: FieldValue(value=value, color=color_for_field(key, value))
            for key, value in working.items()
        }

        if time_string is None:
            time_string = format_time(arrived_at)

        return LogRecord(
            sequence=sequence,
            raw=raw,
            time_string=time_string,
            arrived_at=arrived_at,
            time=record_time,
            message=message,
            fields=fields,
            parser=parser,
        )
