"""
Demo: Spell-check an inline Handlebars template against a small word list.
"""

import logging

from hbspell.dictionary import WordListOracle
from hbspell.pipeline import all_words, check_template
from hbspell.serialization import corrections_to_yaml


TEMPLATE = """<html>
  <head>
    <style>body { font-famly: serif; }</style>
  </head>
  <body>
    <h1 class="titel">Helo {{user.name}}!</h1>
    {{#if messages}}
      <p>You have {{messages.length}} new mesages &amp; alerts.</p>
    {{else}}
      <p>Nothing new in your inbox, don’t worry.</p>
    {{/if}}
    <script>var wrold = "ignored";</script>
  </body>
</html>
"""

WORDS = """
you have new messages alerts nothing in your inbox don't worry hello
""".split()


def print_correction(correction):
    """Pretty-print one Correction."""
    line = TEMPLATE.split("\n")[correction.line - 1]
    print(f"File {correction.source}:{correction.line}")
    print(f"  {correction.original}")
    print(f"  > {line}")
    print("    " + " " * correction.column + "^" * len(correction.original))
    print(f"  Suggestions: {', '.join(correction.suggestions) or '(none)'}")
    print()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("=" * 70)
    print("WORDS FOUND")
    print("=" * 70)
    for word in all_words(TEMPLATE, "inline.hbs"):
        print(f"  {word.line:>3}:{word.column:<3} {word.word}")
    print()

    print("=" * 70)
    print("CORRECTIONS")
    print("=" * 70)
    oracle = WordListOracle(WORDS)
    corrections = check_template(
        TEMPLATE,
        "inline.hbs",
        oracle,
        on_correction=print_correction,
        on_done=lambda: print("✅ All words checked"),
    )

    print()
    print(corrections_to_yaml(sorted(corrections, key=lambda c: (c.line, c.column))))
