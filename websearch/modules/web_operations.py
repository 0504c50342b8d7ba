# websearch/modules/web_operations.py
import os
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from websearch.errors import UnsupportedEngineError, WebSearchError
from websearch.modules.url_encoding import SAFE_ENCODINGS, EncodingOptions, percent_encode

# Engine name -> URL template. The encoded query is appended to the template.
BUILTIN_ENGINES = {
    "google": "https://www.google.com/search?q=",
    "bing": "https://www.bing.com/search?q=",
    "brave": "https://search.brave.com/search?q=",
    "yahoo": "https://search.yahoo.com/search?p=",
    "duckduckgo": "https://www.duckduckgo.com/?q=",
    "startpage": "https://www.startpage.com/do/search?q=",
    "yandex": "https://yandex.ru/yandsearch?text=",
    "github": "https://github.com/search?q=",
    "baidu": "https://www.baidu.com/s?wd=",
    "ecosia": "https://www.ecosia.org/search?q=",
    "goodreads": "https://www.goodreads.com/search?q=",
    "qwant": "https://www.qwant.com/?q=",
    "givero": "https://www.givero.com/search?q=",
    "stackoverflow": "https://stackoverflow.com/search?q=",
    "wolframalpha": "https://www.wolframalpha.com/input/?i=",
    "archive": "https://web.archive.org/web/*/",
    "scholar": "https://scholar.google.com/scholar?q=",
    "ask": "https://www.ask.com/web?q=",
    "youtube": "https://www.youtube.com/results?search_query=",
    # AI / social
    "grok": "https://grok.com/c?q=",
    "google-ai": "https://www.google.com/search?udm=50&source=searchlabs&q=",
    "twitter": "https://x.com/search?q=",
    "chatgpt": "https://chatgpt.com/?q=",
    "mistral": "https://chat.mistral.ai/chat?q=",
}

# Short aliases on top of the one-alias-per-engine set.
SHORT_ALIASES = {
    "g": "google",
    "brs": "brave",
    "ddg": "duckduckgo",
    "sp": "startpage",
    "yt": "youtube",
    "grk": "grok",
    "tw": "twitter",
    "gai": "google-ai",
    "mist": "mistral",
}

# Reserved characters stay literal in search queries.
QUERY_ENCODING = EncodingOptions(preserve_reserved=True)

HELP_TEXT = """Usage: web <engine> [query]
       web [-l | --list] [-h | --help] [--aliases]

Flags:
  -l, --list    List all available search engines.
  -h, --help    Show this help message.
  --aliases     Print shell aliases for every engine (eval "$(web --aliases)").

Custom engines are read from WEB_SEARCH_ENGINES as "name template" pairs."""


class EngineTable(Mapping):
    """
    Read-only mapping of engine name to URL template.

    Built-in engines are overlaid with `overrides`: an override replaces a
    built-in of the same name and may also add new names.
    """

    def __init__(self, overrides: dict = None, builtins: dict = BUILTIN_ENGINES):
        merged = dict(builtins)
        merged.update(overrides or {})
        self._engines = MappingProxyType(merged)

    def __getitem__(self, name):
        return self._engines[name]

    def __iter__(self):
        return iter(self._engines)

    def __len__(self):
        return len(self._engines)

    def names(self) -> list:
        return sorted(self._engines)


@dataclass(frozen=True)
class SearchRequest:
    engine: str
    words: tuple = ()

    @property
    def query(self) -> str:
        return " ".join(self.words)


def homepage(template: str) -> str:
    """Scheme and host of a template, e.g. 'https://www.google.com'."""
    segments = [segment for segment in template.split("/") if segment]
    return "//".join(segments[:2])


class EngineResolver:
    def __init__(self, engines: EngineTable, opener, encoding: str = None):
        self.engines = engines
        self.opener = opener
        # Declared encoding of the terminal, None for UTF-8.
        self.encoding = encoding

    def build_url(self, engine: str, words=()) -> str:
        """
        Builds the URL for a search, or the engine's homepage if there are no words.

        Raises:
            UnsupportedEngineError: `engine` is not in the engine table.
        """
        if engine not in self.engines:
            raise UnsupportedEngineError(engine)
        template = self.engines[engine]
        if words:
            return template + self.encode_query(" ".join(words))
        return homepage(template)

    def encode_query(self, query: str) -> str:
        if self.encoding is None or self.encoding in SAFE_ENCODINGS:
            return percent_encode(query, QUERY_ENCODING)
        # Recover the bytes the terminal sent, then transcode them from its encoding.
        return percent_encode(os.fsencode(query), QUERY_ENCODING, self.encoding)

    def resolve(self, engine: str, words=()) -> str:
        url = self.build_url(engine, words)
        self.opener.open(url)
        return url

    def search(self, request: SearchRequest) -> str:
        return self.resolve(request.engine, request.words)


def list_engines(engines: EngineTable) -> list:
    return engines.names()


def help_text() -> str:
    return HELP_TEXT


def alias_definitions(engines: EngineTable) -> list:
    """
    Shell alias lines for every engine, plus the short aliases whose engine exists.

    Suitable for `eval "$(web --aliases)"` in a POSIX shell.
    """
    aliases = {name: name for name in engines}
    for alias, engine in SHORT_ALIASES.items():
        if engine in engines and alias not in aliases:
            aliases[alias] = engine
    return [f"alias {alias}='web {engine}'" for alias, engine in sorted(aliases.items())]


def search_web(engine: str, words: list, config, launcher=None):
    """
    Searches the web with the given engine, or opens its homepage without words.

    Args:
        engine (str): Name of the engine, e.g. "google" or a custom engine.
        words (list): Query words, joined with single spaces before encoding.
        config (WebSearchConfig): Engine overrides and opener settings.
        launcher (DetachedLauncher, optional): Starts the opener program.
    """
    request = SearchRequest(engine=engine, words=tuple(words))
    resolver = EngineResolver(
        config.engine_table(), config.make_opener(launcher), encoding=config.encoding
    )
    try:
        url = resolver.search(request)
    except WebSearchError as e:
        return {"status": "error", "message": str(e)}
    if request.words:
        message = f"Searching for '{request.query}' on {engine}."
    else:
        message = f"Opening {engine} homepage."
    return {"status": "success", "message": message, "url": url}
