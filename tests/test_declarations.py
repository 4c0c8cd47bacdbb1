"""Tests for loading declaration files."""

import pytest
import yaml

from asaprov.declarations import load_declarations, parse_declarations
from asaprov.errors import SchemaError

from conftest import bare_job_block, job_block


class TestParseDeclarations:
    """Tests for parse_declarations."""

    def test_empty_document(self):
        assert parse_declarations(None) == []
        assert parse_declarations({}) == []

    def test_declarations_and_addresses(self):
        declarations = parse_declarations({
            "stream_analytics_job": {
                "clickstream": job_block(),
                "audit": bare_job_block(name="audit-job"),
            }
        })

        assert [d.address for d in declarations] == [
            "stream_analytics_job.clickstream",
            "stream_analytics_job.audit",
        ]
        assert declarations[1].config.name == "audit-job"

    def test_unknown_resource_type(self):
        with pytest.raises(SchemaError, match="Unknown resource type"):
            parse_declarations({"event_hub": {"x": {}}})

    def test_not_a_mapping(self):
        with pytest.raises(SchemaError, match="mapping"):
            parse_declarations(["stream_analytics_job"])

    def test_bad_label(self):
        with pytest.raises(SchemaError, match="Invalid resource address"):
            parse_declarations({"stream_analytics_job": {"click stream": bare_job_block()}})

    def test_block_error_names_address(self):
        with pytest.raises(SchemaError, match=r"^stream_analytics_job\.broken: "):
            parse_declarations({"stream_analytics_job": {"broken": bare_job_block(sku="Basic")}})


class TestLoadDeclarations:
    """Tests for load_declarations."""

    def test_load_file(self, tmp_path):
        path = tmp_path / "jobs.yaml"
        path.write_text(yaml.safe_dump({"stream_analytics_job": {"clickstream": job_block()}}))

        declarations = load_declarations(path)

        assert len(declarations) == 1
        assert declarations[0].config.transformation.name == "t1"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_declarations(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "jobs.yaml"
        path.write_text("stream_analytics_job: [unclosed")

        with pytest.raises(SchemaError, match="Invalid YAML"):
            load_declarations(path)
