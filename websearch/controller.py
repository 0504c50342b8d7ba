# websearch/controller.py
"""
`web` command: search the web from the terminal.

    web <engine> [query ...]    search, or open the engine homepage without a query
    web -l | --list | (no args) list available engines
    web -h | --help             show usage
    web --aliases               print shell aliases for every engine
"""
import sys

from websearch.config import WebSearchConfig, load_env
from websearch.errors import WebSearchError
from websearch.modules.web_operations import (
    alias_definitions,
    help_text,
    list_engines,
    search_web,
)


def main(argv=None, launcher=None) -> int:
    argv = sys.argv[1:] if argv is None else list(argv)

    if argv and argv[0] in ("-h", "--help"):
        print(help_text())
        return 0

    load_env()
    try:
        config = WebSearchConfig.from_env()
    except WebSearchError as e:
        print(f"❌ Error: {e}", file=sys.stderr)
        return 1

    if not argv or argv[0] in ("-l", "--list"):
        for name in list_engines(config.engine_table()):
            print(name)
        return 0

    if argv[0] == "--aliases":
        for line in alias_definitions(config.engine_table()):
            print(line)
        return 0

    engine, words = argv[0], argv[1:]
    result = search_web(engine, words, config, launcher=launcher)
    if result["status"] != "success":
        print(f"❌ Error: {result['message']}", file=sys.stderr)
        return 1

    if config.verbose:
        print(f"{result['message']} {result['url']}", file=sys.stderr)
    print("✅ Done!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
