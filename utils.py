# utils.py

from dateutil import parser
import datetime
import pytz
import re
import logging

logger = logging.getLogger(__name__)

COMMAND_DATE_FORMAT = "%d/%m/%Y %H:%M"
DATE_PATTERN = re.compile(r"^\d{2}/\d{2}/\d{4}$")
TIME_PATTERN = re.compile(r"^\d{2}:\d{2}$")


def setup_logging(level="INFO", log_file=None):
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers
    )
    # discord.py is chatty at DEBUG
    logging.getLogger("discord").setLevel(logging.INFO)


def ensure_utc(value):
    """Return ``value`` as an aware UTC datetime; naive values are taken as UTC."""
    if value.tzinfo is None or value.tzinfo.utcoffset(value) is None:
        return value.replace(tzinfo=pytz.utc)
    return value.astimezone(pytz.utc)


def parse_iso_datetime(value):
    if isinstance(value, datetime.datetime):
        return ensure_utc(value)
    if not isinstance(value, str):
        value = str(value)
    return ensure_utc(parser.isoparse(value))


def parse_event_date(date_str, time_str, timezone="UTC"):
    """
    Parse the ``dd/mm/yyyy`` and ``HH:MM`` parts of an event command.

    The values are interpreted in ``timezone`` and returned as an aware UTC
    datetime. Raises ValueError on malformed input.
    """
    date_str = date_str.strip()
    time_str = time_str.strip()
    if not DATE_PATTERN.match(date_str) or not TIME_PATTERN.match(time_str):
        raise ValueError(f"Invalid event date: {date_str} {time_str}")

    naive = datetime.datetime.strptime(f"{date_str} {time_str}", COMMAND_DATE_FORMAT)
    local_tz = pytz.timezone(timezone)
    return local_tz.localize(naive).astimezone(pytz.utc)


def to_local(value, timezone="UTC"):
    return ensure_utc(value).astimezone(pytz.timezone(timezone))


def format_event_day(value, timezone="UTC"):
    return to_local(value, timezone).strftime("%d/%m/%Y")


def format_event_time(value, timezone="UTC"):
    return to_local(value, timezone).strftime("%H:%M")


def utc_now():
    return datetime.datetime.now(pytz.utc)


def is_in_future(value, now=None):
    now = now or utc_now()
    return ensure_utc(value) > now
