# -*- coding: utf-8 -*-

"""
Unit tests for main.py CLI functions.
Tests for parse_cli_args(), resolve_server_config(), print_startup_banner()
and create_app().
"""

import argparse
import sys
from unittest.mock import patch

import pytest


def config_patches(host, port):
    """Patches env-derived host/port as seen by main.py."""
    return (
        patch("main.SERVER_HOST", host),
        patch("main.SERVER_PORT", port),
        patch("main.DEFAULT_SERVER_HOST", "0.0.0.0"),
        patch("main.DEFAULT_SERVER_PORT", 8000),
    )


class TestParseCliArgs:
    """Tests for parse_cli_args() function."""

    def test_default_values_are_none(self):
        """
        What it does: Verifies that default values for host and port are None.
        Purpose: None means "use env or default" in priority resolution.
        """
        from main import parse_cli_args

        print("Action: Calling parse_cli_args with no arguments...")
        with patch.object(sys, "argv", ["main.py"]):
            args = parse_cli_args()

        print(f"args.host: {args.host}, args.port: {args.port}")
        assert args.host is None
        assert args.port is None

    @pytest.mark.parametrize(
        "argv,host,port",
        [
            (["--port", "9000"], None, 9000),
            (["-p", "8080"], None, 8080),
            (["--host", "127.0.0.1"], "127.0.0.1", None),
            (["-H", "10.0.0.1", "-p", "3000"], "10.0.0.1", 3000),
        ],
    )
    def test_arguments(self, argv, host, port):
        """
        What it does: Verifies long and short forms of --host / --port.
        Purpose: Port is parsed as int.
        """
        from main import parse_cli_args

        with patch.object(sys, "argv", ["main.py", *argv]):
            args = parse_cli_args()

        assert args.host == host
        assert args.port == port

    def test_invalid_port_exits(self):
        from main import parse_cli_args

        with patch.object(sys, "argv", ["main.py", "--port", "abc"]):
            with pytest.raises(SystemExit) as exc_info:
                parse_cli_args()

        assert exc_info.value.code == 2

    def test_version_flag_exits_with_zero(self, capsys):
        """
        What it does: Verifies --version prints the version and exits 0.
        Purpose: Standard CLI behaviour.
        """
        from main import parse_cli_args
        from relay.config import APP_VERSION

        with patch.object(sys, "argv", ["main.py", "--version"]):
            with pytest.raises(SystemExit) as exc_info:
                parse_cli_args()

        assert exc_info.value.code == 0
        assert APP_VERSION in capsys.readouterr().out


class TestResolveServerConfig:
    """Tests for resolve_server_config() priority: CLI > env > default."""

    def test_cli_args_take_priority_over_env(self):
        from main import resolve_server_config

        args = argparse.Namespace(host="127.0.0.1", port=9999)
        p1, p2, p3, p4 = config_patches("192.168.1.100", 3000)
        with p1, p2, p3, p4:
            host, port = resolve_server_config(args)

        print(f"Resolved: {host}:{port}")
        assert (host, port) == ("127.0.0.1", 9999)

    def test_env_vars_take_priority_over_defaults(self):
        from main import resolve_server_config

        args = argparse.Namespace(host=None, port=None)
        p1, p2, p3, p4 = config_patches("192.168.1.100", 3000)
        with p1, p2, p3, p4:
            host, port = resolve_server_config(args)

        assert (host, port) == ("192.168.1.100", 3000)

    def test_values_resolved_independently(self):
        """
        What it does: CLI host with env port.
        Purpose: Each value falls back on its own.
        """
        from main import resolve_server_config

        args = argparse.Namespace(host="127.0.0.1", port=None)
        p1, p2, p3, p4 = config_patches("0.0.0.0", 9000)
        with p1, p2, p3, p4:
            host, port = resolve_server_config(args)

        assert (host, port) == ("127.0.0.1", 9000)

    def test_defaults_used_when_env_empty(self):
        from main import resolve_server_config

        args = argparse.Namespace(host=None, port=None)
        p1, p2, p3, p4 = config_patches("", 0)
        with p1, p2, p3, p4:
            host, port = resolve_server_config(args)

        assert (host, port) == ("0.0.0.0", 8000)


class TestPrintStartupBanner:
    """Tests for print_startup_banner()."""

    def test_banner_uses_localhost_for_all_interfaces(self, capsys):
        """
        What it does: Verifies 0.0.0.0 is shown as localhost.
        Purpose: Printed URLs are clickable.
        """
        from main import print_startup_banner

        print_startup_banner("0.0.0.0", 8000)
        output = capsys.readouterr().out

        assert "http://localhost:8000" in output
        assert "0.0.0.0" not in output

    def test_banner_contains_urls(self, capsys):
        from main import print_startup_banner

        print_startup_banner("127.0.0.1", 9000)
        output = capsys.readouterr().out

        assert "http://127.0.0.1:9000/docs" in output
        assert "http://127.0.0.1:9000/health" in output


class TestCreateApp:
    """Tests for create_app()."""

    def test_routes_registered(self):
        """
        What it does: Verifies all endpoints are mounted.
        Purpose: create_app() wires the router in.
        """
        from main import create_app

        app = create_app()
        paths = {route.path for route in app.routes}

        print(f"Paths: {sorted(paths)}")
        assert {"/", "/health", "/v1/models", "/v1/chat/completions"} <= paths

    def test_module_level_app(self):
        from fastapi import FastAPI

        import main

        assert isinstance(main.app, FastAPI)
