import configparser
import functools
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import NamedTuple

logger = logging.getLogger(__name__)


class Options(NamedTuple):
    collection_path: Path = Path()
    txt_path: Path = Path("txt")
    dwc_path: Path = Path("dwc")
    problems_filename: Path = Path("problems.csv")


def parse_path(section: Mapping[str, str], key: str, base_path: Path) -> Path:
    if key not in section:
        return base_path
    else:
        raw_path = section[key]
        path = Path(raw_path).expanduser()
        if not path.is_absolute():
            path = base_path / path
        return path


@functools.cache
def parse_config_file(filename: Path) -> Options:
    parser = configparser.ConfigParser()
    parser.read(filename)
    try:
        section = parser["idkeys"]
    except KeyError:
        logger.warning('config file %s missing required section "idkeys"', filename)
        return Options()
    else:
        collection_path = parse_path(section, "collection_path", filename.parent)
        return Options(
            collection_path=collection_path,
            txt_path=(
                parse_path(section, "txt_path", filename.parent)
                if "txt_path" in section
                else collection_path / "txt"
            ),
            dwc_path=(
                parse_path(section, "dwc_path", filename.parent)
                if "dwc_path" in section
                else collection_path / "dwc"
            ),
            problems_filename=(
                parse_path(section, "problems_filename", filename.parent)
                if "problems_filename" in section
                else collection_path / "problems.csv"
            ),
        )


def get_options() -> Options:
    if "IDKEYS_CONFIG_FILE" in os.environ:
        config_file = Path(os.environ["IDKEYS_CONFIG_FILE"])
    else:
        config_file = Path(__file__).parent.parent / "idkeys.ini"
    return parse_config_file(config_file)
