"""Tests for the help page, configuration, logging, dashboard and CLI helpers."""

import json

import pytest

from cli import _parse_port
from core.config import Config, load_config
from core.exceptions import ConfigurationError
from core.headers import HeaderBuilder
from core.help_page import render_help
from ui import log_utils
from ui.dashboard import Dashboard
from ui.log_utils import clear_logs, redact_headers, write_incoming_log


# ============================================================================
# Help page
# ============================================================================

def test_help_uses_relay_address():
    page = render_help("https", "relay.example.dev")

    assert "https://relay.example.dev/&lt;url-to-resource&gt;" in page
    assert "https://relay.example.dev/https://api.github.com/repos/AsmSafone/SafoneAPI/releases" in page


def test_help_escapes_hostname():
    page = render_help("http", "<script>")

    assert "<script>" not in page
    assert "&lt;script&gt;" in page


# ============================================================================
# Headers
# ============================================================================

def test_forward_headers_drop_set_is_case_insensitive():
    headers = HeaderBuilder().build_forward_headers(
        [
            ("Host", "relay.dev"),
            ("Content-Length", "10"),
            ("CONTENT-TYPE", "application/json"),
            ("Accept", "text/html"),
            ("X-Multi", "1"),
            ("X-Multi", "2"),
        ]
    )

    assert headers == [("accept", "text/html"), ("x-multi", "1"), ("x-multi", "2")]


def test_cors_headers_set_content_type_only_when_known():
    builder = HeaderBuilder()

    assert "content-type" not in builder.build_cors_headers(None)
    assert builder.build_cors_headers(None, "text/html")["content-type"] == "text/html"


# ============================================================================
# Configuration
# ============================================================================

def test_load_config_creates_default(tmp_path):
    config_file = tmp_path / "cors-relay" / "config.json"

    config = load_config(config_file)

    assert config == Config()
    assert json.loads(config_file.read_text())["server"]["port"] == 8080


def test_load_config_reads_overrides(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text(json.dumps({"server": {"port": 9000}, "upstream": {"timeout": 5}}))

    config = load_config(config_file)

    assert config.server.port == 9000
    assert config.upstream.timeout == 5.0
    assert config.upstream.follow_redirects is True


def test_load_config_backs_up_corrupt_file(tmp_path):
    config_file = tmp_path / "config.json"
    config_file.write_text("{not json")

    config = load_config(config_file)

    assert config == Config()
    assert (tmp_path / "config.json.bak").read_text() == "{not json"


# ============================================================================
# Logging
# ============================================================================

def test_redact_headers_masks_secrets():
    redacted = redact_headers(
        {
            "authorization": "Bearer abcdefghijklmnop",
            "x-api-key": "short",
            "cookie": "session=0123456789abcdef",
            "accept": "*/*",
        }
    )

    assert redacted["authorization"] == "Bearer...mnop"
    assert redacted["x-api-key"] == "***"
    assert redacted["cookie"] == "sessio...cdef"
    assert redacted["accept"] == "*/*"


def test_incoming_log_written_redacted(isolated_logs):
    path = write_incoming_log(
        "GET", "/https://a.com", {"authorization": "Bearer abcdefghijklmnop"}
    ).result()

    payload = json.loads(path.read_text())
    assert path.parent == isolated_logs / "incoming"
    assert payload["method"] == "GET"
    assert payload["headers"]["authorization"] == "Bearer...mnop"


def test_cli_log_appends_lines(isolated_logs):
    log_utils.write_cli_log("FORWARD", "https://a.com", status=200).result()
    log_utils.write_cli_log("ERROR", "boom").result()

    lines = (isolated_logs / "relay.log").read_text().splitlines()
    assert lines[0].endswith("FORWARD: https://a.com status=200")
    assert lines[1].endswith("ERROR: boom")


def test_clear_logs_removes_directory(isolated_logs):
    write_incoming_log("GET", "/", {}).result()

    clear_logs()

    assert not isolated_logs.exists()


# ============================================================================
# Dashboard
# ============================================================================

def test_dashboard_counts_each_route():
    dashboard = Dashboard(Config())

    dashboard.log_help("GET", "", 200)
    dashboard.log_forward("GET", "https://a.com/x", 200, headers={})
    dashboard.log_forward("POST", "https://a.com/y", 404, headers={})
    dashboard.log_error("https://a.com/z", 500, "boom")

    assert dashboard._request_count == {"forwarded": 2, "help": 1, "errors": 1}
    assert [r.method for r in dashboard._recent] == ["POST", "GET"]
    assert dashboard._recent[0].status == 404


def test_dashboard_keeps_three_latest_errors():
    dashboard = Dashboard(Config())

    for i in range(5):
        dashboard.log_error(f"https://a.com/{i}", 500, f"error {i}")

    assert len(dashboard._errors) == 3
    assert dashboard._errors[0].endswith("error 4")
    assert dashboard._errors[-1].endswith("error 2")


def test_dashboard_truncates_long_targets():
    dashboard = Dashboard(Config())

    dashboard.log_forward("GET", "https://a.com/" + "x" * 100, 200, headers={})

    assert dashboard._recent[0].target.endswith("...")
    assert len(dashboard._recent[0].target) == 73


def test_dashboard_caps_recent_requests():
    dashboard = Dashboard(Config())

    for i in range(15):
        dashboard.log_forward("GET", f"https://a.com/{i}", 200, headers={})

    assert len(dashboard._recent) == 10
    assert dashboard._recent[0].target == "https://a.com/14"


# ============================================================================
# CLI
# ============================================================================

def test_parse_port_accepts_valid_value():
    assert _parse_port(["9000"]) == 9000


@pytest.mark.parametrize("values", [[], ["abc"], ["0"], ["65536"], ["-1"]])
def test_parse_port_rejects_bad_values(values):
    with pytest.raises(ConfigurationError):
        _parse_port(values)
