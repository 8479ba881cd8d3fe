"""
Tests for the ClearSeller command-line interface.

Run with: pytest tests/test_cli.py -v
"""

import json
import logging
import os

import pytest

from clearseller.config import reset_settings
from clearseller.orchestrator.cli import build_parser, main


OTHER_ENV_VARS = ("LOG_LEVEL", "LOG_FILE", "LOG_JSON", "LOG_ENGINE_LEVEL", "ENVIRONMENT")


@pytest.fixture(autouse=True)
def isolated_cli(monkeypatch):
    """Default settings and untouched root logging for every test."""
    for key in list(os.environ):
        if key.startswith("CLEARSELLER_") or key in OTHER_ENV_VARS:
            monkeypatch.delenv(key, raising=False)
    reset_settings()

    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    reset_settings()


@pytest.fixture
def listing_file(tmp_path):
    products = [
        {"title": "Cheap gadget", "price": "$3.10", "rating": "3.9", "reviewCount": "40"},
        {
            "title": "Magnetic Car Phone Mount",
            "price": "US $8.00",
            "rating": "4.8",
            "reviewCount": "12K",
            "orderCount": "60,000 sold",
            "images": ["1.jpg", "2.jpg", "3.jpg", "4.jpg", "5.jpg"],
            "source": "aliexpress",
        },
        {
            "title": "Desk Lamp",
            "supplierPrice": 25,
            "rating": 4.3,
            "reviewCount": 1000,
            "orderCount": 1000,
            "imageCount": 4,
            "source": "amazon",
        },
    ]
    path = tmp_path / "listing.json"
    path.write_text(json.dumps(products), encoding="utf-8")
    return path


class TestParser:

    def test_commands_registered(self):
        parser = build_parser()
        args = parser.parse_args(["price", "--supplier-price", "8"])

        assert args.command == "price"
        assert args.source == "aliexpress"

    def test_no_command(self, capsys):
        assert main([]) == 1


class TestScoreCommand:

    def test_score_payload_json(self, capsys):
        payload = json.dumps({"price": 8, "rating": 4.8, "reviewCount": 12000,
                              "orderCount": 60000, "imageCount": 5, "source": "aliexpress"})

        assert main(["score", "--payload", payload, "--json"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["analysis"]["totalScore"] == 100
        assert output["analysis"]["isWinner"] is True
        assert output["analysis"]["suggestedPrice"] == 24.99
        assert output["signal"]["source"] == "aliexpress"

    def test_score_file_text(self, tmp_path, capsys):
        path = tmp_path / "product.json"
        path.write_text(json.dumps({"title": "Mystery item"}), encoding="utf-8")

        assert main(["score", "--file", str(path)]) == 0

        out = capsys.readouterr().out
        assert "SCORING RESULT: Mystery item" in out
        assert "Total Score: 18/100" in out
        assert "Potential: LOW" in out
        assert "Unproven product - no validation from market" in out

    def test_score_requires_input(self, capsys):
        assert main(["score"]) == 1
        assert "ERROR" in capsys.readouterr().out

    def test_score_invalid_payload(self, capsys):
        assert main(["score", "--payload", "[1, 2]"]) == 1
        assert "ERROR: Failed to score product" in capsys.readouterr().out


class TestScanCommand:

    def test_scan_json(self, listing_file, capsys):
        assert main(["scan", "--file", str(listing_file), "--json"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["scanned"] == 3
        assert output["filteredOut"] == 1
        assert output["winners"] == 1
        titles = [item["signal"]["title"] for item in output["results"]]
        assert titles == ["Magnetic Car Phone Mount", "Desk Lamp"]

    def test_scan_text_with_limit(self, listing_file, capsys):
        assert main(["scan", "--file", str(listing_file), "--no-prefilter", "--limit", "1"]) == 0

        out = capsys.readouterr().out
        assert "Scanned: 3" in out
        assert "Magnetic Car Phone Mount" in out
        assert "Desk Lamp" not in out

    def test_scan_rejects_negative_limit(self, listing_file, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["scan", "--file", str(listing_file), "--limit", "-1"])

        assert excinfo.value.code == 2
        assert "must be >= 0" in capsys.readouterr().err

    def test_scan_rejects_non_array(self, tmp_path, capsys):
        path = tmp_path / "one.json"
        path.write_text("{}", encoding="utf-8")

        assert main(["scan", "--file", str(path)]) == 1
        assert "JSON array" in capsys.readouterr().out

    def test_scan_skip_invalid(self, tmp_path, capsys):
        path = tmp_path / "mixed.json"
        path.write_text(json.dumps([{"title": "ok"}, "broken"]), encoding="utf-8")

        assert main(["scan", "--file", str(path), "--no-prefilter"]) == 1
        capsys.readouterr()

        assert main(["scan", "--file", str(path), "--no-prefilter", "--skip-invalid", "--json"]) == 0
        output = json.loads(capsys.readouterr().out)
        assert output["scanned"] == 1


class TestPriceCommand:

    def test_price_text(self, capsys):
        assert main(["price", "--supplier-price", "10"]) == 0
        assert "Suggested price: $29.99" in capsys.readouterr().out

    def test_price_json_with_source(self, capsys):
        assert main(["price", "--supplier-price", "5", "--source", "temu", "--json"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["markupMultiplier"] == 3.0
        assert output["suggestedPrice"] == 15.99

    def test_price_override(self, capsys):
        assert main(["price", "--supplier-price", "10", "--price", "34.5"]) == 0
        assert "Suggested price: $34.50" in capsys.readouterr().out

    def test_price_uses_env_markup(self, monkeypatch, capsys):
        monkeypatch.setenv("CLEARSELLER_MARKUP_ALIEXPRESS", "3")

        assert main(["price", "--supplier-price", "10"]) == 0
        assert "Suggested price: $34.99" in capsys.readouterr().out

    def test_price_failure_is_logged(self, monkeypatch, tmp_path, capsys):
        def unavailable(*args, **kwargs):
            raise RuntimeError("markup table unavailable")

        log_file = tmp_path / "cli.log"
        monkeypatch.setenv("LOG_FILE", str(log_file))
        monkeypatch.setattr("clearseller.orchestrator.cli.suggest_listing_price", unavailable)

        assert main(["price", "--supplier-price", "10"]) == 1
        assert "ERROR: Failed to estimate price" in capsys.readouterr().out

        content = log_file.read_text(encoding="utf-8")
        assert "Price estimation failed" in content
        assert "RuntimeError: markup table unavailable" in content


class TestProfitCommand:

    def test_profit_json(self, capsys):
        assert main(["profit", "--supplier-price", "8", "--selling-price", "24.99", "--json"]) == 0

        output = json.loads(capsys.readouterr().out)
        assert output["costBreakdown"]["fees"]["total"] == 8.55
        assert output["recommendationType"] == "success"

    def test_profit_text(self, capsys):
        assert main(["profit", "--supplier-price", "20", "--selling-price", "24.99", "--platform", "etsy"]) == 0

        out = capsys.readouterr().out
        assert "on etsy" in out
        assert "Low profit margin" in out

    def test_profit_invalid_price(self, capsys):
        assert main(["profit", "--supplier-price", "0", "--selling-price", "24.99"]) == 1
        assert "ERROR: Failed to calculate profit" in capsys.readouterr().out

    def test_profit_failure_is_logged(self, monkeypatch, tmp_path, capsys):
        log_file = tmp_path / "cli.log"
        monkeypatch.setenv("LOG_FILE", str(log_file))

        assert main(["profit", "--supplier-price", "0", "--selling-price", "24.99"]) == 1

        content = log_file.read_text(encoding="utf-8")
        assert "Profit calculation failed" in content
        assert "PricingError" in content


class TestConfigurationErrors:

    def test_invalid_env_value(self, monkeypatch, capsys):
        monkeypatch.setenv("CLEARSELLER_WINNER_THRESHOLD", "high")

        assert main(["price", "--supplier-price", "10"]) == 1
        assert "ERROR: Invalid configuration" in capsys.readouterr().out

    def test_validation_failure(self, monkeypatch, capsys):
        monkeypatch.setenv("CLEARSELLER_WEIGHT_ORDERS", "-1")
        monkeypatch.setenv("CLEARSELLER_VALIDATE_CONFIG", "yes")

        assert main(["price", "--supplier-price", "10"]) == 1
        assert "ERROR: Invalid configuration" in capsys.readouterr().out
