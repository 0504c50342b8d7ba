# websearch/config.py
import os
import platform
import shlex
import sys
from typing import Optional

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from websearch.errors import EngineConfigError
from websearch.modules.application_control import DetachedLauncher, Opener
from websearch.modules.web_operations import EngineTable

# sys.platform -> the $OSTYPE value a shell on that platform would report
SYS_PLATFORM_OS_TYPES = {
    "linux": "linux-gnu",
    "darwin": "darwin",
    "win32": "win32",
    "cygwin": "cygwin",
    "msys": "msys",
}

TRUTHY = ("1", "true", "yes", "on")


def default_os_type() -> str:
    return SYS_PLATFORM_OS_TYPES.get(sys.platform, sys.platform)


def parse_engine_pairs(value: str) -> dict:
    """
    Parses WEB_SEARCH_ENGINES: shell-quoted `name template` pairs.

    Example:
        WEB_SEARCH_ENGINES='reddit "https://www.reddit.com/search/?q=" pypi https://pypi.org/search/?q='
    """
    try:
        tokens = shlex.split(value or "")
    except ValueError as e:
        raise EngineConfigError(f"Could not parse WEB_SEARCH_ENGINES: {e}") from None
    if len(tokens) % 2:
        raise EngineConfigError(
            f"WEB_SEARCH_ENGINES must hold name/template pairs, got {len(tokens)} values."
        )
    return dict(zip(tokens[0::2], tokens[1::2]))


class WebSearchConfig(BaseModel):
    engines: dict[str, str] = Field(
        default_factory=dict, description="Custom engines overlaid on the built-in table."
    )
    browser: Optional[str] = Field(None, description="Program used for http(s) URLs.")
    os_type: str = Field(default_factory=default_os_type)
    kernel_release: str = Field(default_factory=platform.release)
    encoding: Optional[str] = Field(None, description="Encoding of the query text.")
    verbose: bool = False

    @field_validator("engines")
    @classmethod
    def check_templates(cls, engines):
        for name, template in engines.items():
            if not name:
                raise ValueError("engine names must not be empty")
            scheme, separator, rest = template.partition("://")
            if not scheme or not separator or not rest.split("/")[0]:
                raise ValueError(
                    f"template for '{name}' needs a scheme and host: '{template}'"
                )
        return engines

    @classmethod
    def from_env(cls, environ=None):
        """Builds the configuration from environment variables (and .env, via load_env)."""
        environ = os.environ if environ is None else environ
        values = {
            "engines": parse_engine_pairs(environ.get("WEB_SEARCH_ENGINES", "")),
            "browser": environ.get("BROWSER") or None,
            "encoding": environ.get("WEB_SEARCH_ENCODING") or None,
            "verbose": environ.get("WEB_SEARCH_VERBOSE", "").lower() in TRUTHY,
        }
        if environ.get("OSTYPE"):
            values["os_type"] = environ["OSTYPE"]
        if environ.get("WEB_SEARCH_KERNEL"):
            values["kernel_release"] = environ["WEB_SEARCH_KERNEL"]
        try:
            return cls(**values)
        except ValidationError as e:
            messages = "; ".join(error["msg"] for error in e.errors())
            raise EngineConfigError(f"Invalid WEB_SEARCH_ENGINES: {messages}") from None

    def engine_table(self) -> EngineTable:
        return EngineTable(self.engines)

    def make_opener(self, launcher: DetachedLauncher = None) -> Opener:
        return Opener(
            self.os_type,
            kernel_release=self.kernel_release,
            browser=self.browser,
            launcher=launcher,
            verbose=self.verbose,
        )


def load_env():
    """Loads a .env file from the current directory or its parents, without overriding."""
    load_dotenv(find_dotenv(usecwd=True))
