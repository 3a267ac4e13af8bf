"""Static usage page served on the help path."""

from html import escape

RELAY_NAME = "Safone's CORS Proxy"
EXAMPLE_TARGETS = (
    "https://api.github.com/repos/AsmSafone/SafoneAPI",
    "https://api.github.com/repos/AsmSafone/SafoneAPI/releases",
)

_INDENT = "&nbsp;&nbsp;&nbsp;&nbsp;"


def render_help(scheme: str, hostname: str) -> str:
    """Render the usage page for a relay reached at ``scheme://hostname``."""
    base = f"{escape(scheme)}://{escape(hostname)}"
    examples = "\n".join(
        f"    <p>{_INDENT}{base}/{escape(target)}</p>" for target in EXAMPLE_TARGETS
    )
    return f"""<!DOCTYPE html>
<html>
  <head>
    <title>{RELAY_NAME}</title>
    <style>
      body {{
        font-family: "Courier New", Courier, monospace;
      }}
    </style>
  </head>
  <body>
    <p>Welcome to {RELAY_NAME}!</p>
    <p>
      This enables cross-origin requests to anywhere.
      <br>
      You can use this proxy to bypass CORS in the browser.
    </p>
    <p>USAGE:</p>
    <p>{_INDENT}{base}/&lt;url-to-resource&gt;</p>
    <p>EXAMPLES:</p>
{examples}
    <br/>
    <footer>
      <p align="center">
        <a href="https://github.com/AsmSafone">GitHub Repository</a>
        | <a href="https://buymeacoffee.com/safone">Buy Me a Coffee!</a>
      </p>
    </footer>
  </body>
</html>
"""
