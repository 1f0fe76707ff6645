"""Tests for the per-dataset table pipeline."""

import pandas as pd
import pytest

from statcan_trends.contracts import ParseError, SchemaError
from statcan_trends.pipeline import PipelineResult, TablePipeline

from tests.helpers.statcan_frames import grain_raw_frame, soft_drinks_monthly_raw_frame, write_bundle, write_csv

pytestmark = [pytest.mark.unit, pytest.mark.pipeline]


@pytest.fixture
def config(make_config, output_dirs, raw_tables):
    """Config rooted in the temp output dirs, charts off."""
    return make_config(BASE_DIR=str(output_dirs["base"]), visualization={"enabled": False})


@pytest.fixture
def pipeline(config, output_dirs):
    return TablePipeline(config, output_dirs)


class TestGrainExports:

    def test_partition_and_rollup(self, pipeline):
        result = pipeline.run_dataset("grain_exports")

        assert isinstance(result, PipelineResult)
        assert len(result.detail) == 24 * 3
        assert len(result.summary) == 24 * 2
        assert set(result.summary["destination"]) == {"Total exports, all destinations"}
        assert not result.detail["destination"].str.contains("Total").any()

        assert list(result.rollup.columns) == ["commodity", "destination", "year", "value"]
        assert result.rollup.values.tolist() == [
            ["Barley", "Japan", 2019, 24.0],
            ["Barley", "Japan", 2020, 24.0],
            ["Wheat", "Japan", 2019, 48.0],
            ["Wheat", "Japan", 2020, 48.0],
            ["Wheat", "United States", 2019, 120.0],
            ["Wheat", "United States", 2020, 120.0],
        ]
        assert result.levels == ["United States", "Japan"]

    def test_detail_rows_sum_to_totals(self, pipeline):
        result = pipeline.run_dataset("grain_exports")
        assert result.detail["value"].sum() == result.summary["value"].sum()

    def test_detail_has_period_columns(self, pipeline):
        result = pipeline.run_dataset("grain_exports")
        for col in ("date", "geo", "commodity", "destination", "value", "year", "month", "quarter"):
            assert col in result.detail.columns

    def test_csv_outputs_written(self, pipeline, output_dirs):
        result = pipeline.run_dataset("grain_exports")

        assert set(result.outputs) == {"detail", "summary", "rollup", "levels"}
        for path in result.outputs.values():
            assert path.exists()
            assert path.parent == output_dirs["processed"]

        levels = pd.read_csv(result.outputs["levels"])
        assert levels.to_dict("records") == [
            {"rank": 1, "destination": "United States"},
            {"rank": 2, "destination": "Japan"},
        ]
        rolled = pd.read_csv(result.outputs["rollup"])
        assert len(rolled) == 6

    def test_csv_output_can_be_disabled(self, make_config, output_dirs, raw_tables):
        config = make_config(BASE_DIR=str(output_dirs["base"]),
                             visualization={"enabled": False}, output={"write_csv": False})
        result = TablePipeline(config, output_dirs).run_dataset("grain_exports")
        assert result.outputs == {}
        assert list(output_dirs["processed"].iterdir()) == []

    def test_loads_zip_bundle_by_product_id(self, make_config, output_dirs):
        write_bundle(grain_raw_frame(), output_dirs["raw"] / "32100008-eng.zip")
        config = make_config(
            BASE_DIR=str(output_dirs["base"]),
            visualization={"enabled": False},
            DATASETS={"grain_exports": {"path": None, "product_id": "32100008"}},
        )
        result = TablePipeline(config, output_dirs).run_dataset("grain_exports")
        assert result.levels == ["United States", "Japan"]

    def test_download_when_enabled(self, make_config, output_dirs, monkeypatch):
        calls = []

        def fake_fetch(product_id, dest_dir):
            calls.append(product_id)
            return write_bundle(grain_raw_frame(), dest_dir / "32100008-eng.zip")

        monkeypatch.setattr("statcan_trends.pipeline.runner.fetch_table", fake_fetch)
        config = make_config(
            BASE_DIR=str(output_dirs["base"]),
            DOWNLOAD=True,
            visualization={"enabled": False},
            DATASETS={"grain_exports": {"product_id": "32100008"}},
        )
        TablePipeline(config, output_dirs).run_dataset("grain_exports")
        assert calls == ["32100008"]


class TestSoftDrinks:

    def test_monthly_continuation_spliced(self, pipeline):
        result = pipeline.run_dataset("soft_drinks_quarterly")

        assert list(result.rollup.columns) == ["geo", "year", "quarter", "value"]
        assert len(result.rollup) == 184
        assert not result.rollup.duplicated(["year", "quarter"]).any()
        assert result.rollup[["year", "quarter"]].iloc[0].tolist() == [1950, 1]
        assert result.rollup[["year", "quarter"]].iloc[-1].tolist() == [1995, 4]
        assert result.summary.empty
        assert result.levels == ["Canada"]

    def test_base_values_win_in_overlap(self, pipeline):
        rolled = pipeline.run_dataset("soft_drinks_quarterly").rollup
        q = rolled.set_index(["year", "quarter"])["value"]
        assert q.loc[(1977, 4)] == 1000.0 + 1977 + 4
        assert q.loc[(1978, 1)] == 300.0


class TestGreenhouse:

    def test_levels_and_rollup(self, pipeline):
        result = pipeline.run_dataset("greenhouse_flowers")

        assert len(result.summary) == 6
        assert len(result.detail) == 18
        assert len(result.rollup) == 18
        assert result.levels == ["Roses", "Tulips", "Poinsettias"]

    def test_statistic_override(self, make_config, output_dirs, raw_tables):
        config = make_config(
            BASE_DIR=str(output_dirs["base"]),
            visualization={"enabled": False},
            DATASETS={"greenhouse_flowers": {"statistic": "min", "descending": False}},
        )
        result = TablePipeline(config, output_dirs).run_dataset("greenhouse_flowers")
        assert result.levels == ["Poinsettias", "Roses", "Tulips"]


class TestFailures:

    def test_unknown_dataset(self, pipeline):
        with pytest.raises(KeyError):
            pipeline.run_dataset("canola")

    def test_missing_file(self, pipeline, raw_tables):
        (raw_tables / "greenhouse_flowers.csv").unlink()
        with pytest.raises(FileNotFoundError):
            pipeline.run_dataset("greenhouse_flowers")

    def test_malformed_date_is_fatal(self, pipeline, raw_tables, output_dirs):
        df = grain_raw_frame()
        df.loc[5, "REF_DATE"] = "2019/06"
        write_csv(df, raw_tables / "grain_exports.csv")

        with pytest.raises(ParseError, match="2019/06"):
            pipeline.run_dataset("grain_exports")
        assert list(output_dirs["processed"].iterdir()) == []

    def test_missing_merge_key_is_fatal(self, pipeline, raw_tables):
        df = soft_drinks_monthly_raw_frame()
        df.loc[30, "GEO"] = None
        write_csv(df, raw_tables / "soft_drinks_monthly.csv")

        with pytest.raises(SchemaError, match="missing key 'geo'"):
            pipeline.run_dataset("soft_drinks_quarterly")

    def test_run_stops_at_first_failure(self, pipeline, raw_tables, restore_root_logging):
        (raw_tables / "soft_drinks_monthly.csv").unlink()
        with pytest.raises(FileNotFoundError):
            pipeline.run(["grain_exports", "soft_drinks_quarterly", "greenhouse_flowers"])


def test_run_all_selected(pipeline, output_dirs, restore_root_logging):
    results = pipeline.run()

    assert list(results) == ["grain_exports", "soft_drinks_quarterly", "greenhouse_flowers"]
    logs = list(output_dirs["logs"].glob("pipeline_*.log"))
    assert len(logs) == 1
    assert "Pipeline complete: 3 dataset(s)" in logs[0].read_text()


def test_plots_written_when_enabled(make_config, output_dirs, raw_tables):
    config = make_config(BASE_DIR=str(output_dirs["base"]), visualization={"dpi": 50})
    result = TablePipeline(config, output_dirs).run_dataset("greenhouse_flowers")

    assert result.outputs["series_plot"].exists()
    assert result.outputs["levels_plot"].exists()
    assert result.outputs["series_plot"].name == "greenhouse_flowers_series.png"
