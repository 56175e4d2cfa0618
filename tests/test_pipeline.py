"""
Tests for the pipeline nodes and the end-to-end image and sieve pipelines.
"""
import math

import pytest

from src.domain import (AnalysisSession, DetectedRegion, EmptyOrZeroWeightInput,
                        GradationResult, InvalidCalibrationInput)
from src.nodes.base import PipelineNode
from src.nodes.granulometry import GradationCurveNode, parse_sieve_rows
from src.pipeline import GradationPipeline

SIEVE_ROWS = [
    {"label": "#4", "size": "4750", "weight": "50"},
    {"label": "#10", "size": 2000, "weight": 30},
    {"label": "#20", "size": 850, "weight": 20},
]

CALIBRATION = {"start": [0, 0], "end": [100, 0], "reference_length": 10}


class RecordingNode(PipelineNode):
    def __init__(self):
        super().__init__("recorder")
        self.seen = []

    def run(self, context):
        self.seen.append(context.get('gradation_result'))
        return context


# ---------------------------------------------------------------------------
# Sieve table parsing
# ---------------------------------------------------------------------------

class TestParseSieveRows:

    def test_micrometres_are_converted_to_millimetres(self):
        entries = parse_sieve_rows(SIEVE_ROWS)
        assert [e.opening_size for e in entries] == pytest.approx([4.75, 2.0, 0.85])
        assert [e.retained_weight for e in entries] == pytest.approx([50, 30, 20])
        assert [e.label for e in entries] == ["#4", "#10", "#20"]

    def test_unparseable_rows_are_skipped(self):
        rows = SIEVE_ROWS + [
            {"label": "blank", "size": "", "weight": 10},
            {"label": "text", "size": "abc", "weight": 10},
            {"label": "no weight", "size": 425},
            {"label": "nan", "size": "nan", "weight": 1},
        ]
        assert len(parse_sieve_rows(rows)) == 3

    def test_custom_divisor(self):
        entries = parse_sieve_rows([{"size": 4.75, "weight": 1}], size_divisor=1.0)
        assert entries[0].opening_size == pytest.approx(4.75)


class TestGradationCurveNode:

    def test_unknown_source_is_rejected(self):
        with pytest.raises(ValueError):
            GradationCurveNode(source="laser")


# ---------------------------------------------------------------------------
# Sieve pipeline
# ---------------------------------------------------------------------------

class TestSievePipeline:

    def test_reference_sieve_analysis(self):
        context = GradationPipeline(source="sieve").run({"job_id": "s1", "sieve_rows": SIEVE_ROWS})

        result: GradationResult = context['gradation_result']
        assert result.source == "sieve"
        assert result.total_particles == 0
        assert result.diameters.d50 == pytest.approx(4.75)
        assert result.display["D50"] == "4.75"
        assert result.display["D10"] == f"{math.sqrt(0.85 * 2.0):.2f}"
        assert result.histogram is None
        assert result.curve[0] == (0.001, 0.0)
        assert result.curve[-1][1] == 100.0

    def test_records_execution_times(self):
        pipeline = GradationPipeline(source="sieve")
        context = pipeline.run({"sieve_rows": SIEVE_ROWS})
        times = context['execution_times']
        assert set(node.name for node in pipeline.nodes) <= set(times)
        assert 'total_pipeline' in times

    def test_no_usable_rows_aborts(self):
        with pytest.raises(EmptyOrZeroWeightInput):
            GradationPipeline(source="sieve").run({"sieve_rows": [{"size": "x", "weight": 1}]})

    def test_zero_weight_aborts(self):
        rows = [{"size": 4750, "weight": 0}, {"size": 2000, "weight": 0}]
        with pytest.raises(EmptyOrZeroWeightInput):
            GradationPipeline(source="sieve").run({"sieve_rows": rows})

    def test_result_sender_runs_last(self):
        recorder = RecordingNode()
        pipeline = GradationPipeline(source="sieve", result_sender=recorder)
        pipeline.run({"sieve_rows": SIEVE_ROWS})
        assert pipeline.nodes[-1] is recorder
        assert isinstance(recorder.seen[0], GradationResult)


# ---------------------------------------------------------------------------
# Image pipeline (regions supplied by an upstream vision collaborator)
# ---------------------------------------------------------------------------

def image_context(regions, calibration=CALIBRATION, session=None):
    session = session or AnalysisSession()
    if session.image_id is None:
        session.load_image("sample.jpg")
    return {"job_id": "i1", "session": session, "calibration": calibration, "regions": regions}


class TestImagePipeline:

    def test_reference_region_scenario(self):
        context = GradationPipeline(source="image").run(image_context([DetectedRegion(785, None)]))

        assert context['scale_factor'] == pytest.approx(10.0)
        assert context['particle_sizes'] == pytest.approx([math.sqrt(4 * 7.85 / math.pi)])
        assert context['session'].particle_sizes == context['particle_sizes']

    def test_full_result(self):
        regions = [DetectedRegion(area, None) for area in (200, 400, 785, 1200, 2500, 5000)]
        context = GradationPipeline(source="image", nbins=3).run(image_context(regions))

        result: GradationResult = context['gradation_result']
        assert result.source == "image"
        assert result.total_particles == 6
        assert sum(result.histogram.counts) == 6
        assert len(result.histogram.labels) == 3
        d = result.diameters
        assert 0 < d.d10 <= d.d30 <= d.d50 <= d.d60
        assert d.cu == pytest.approx(d.d60 / d.d10)

    def test_no_regions_is_not_an_error(self):
        context = GradationPipeline(source="image").run(image_context([]))

        result: GradationResult = context['gradation_result']
        assert result.total_particles == 0
        assert result.curve == []
        assert result.diameters.cu == 0
        assert result.diameters.cc == 0
        assert result.histogram.counts == []

    def test_uncalibrated_session_blocks_extraction(self):
        with pytest.raises(InvalidCalibrationInput):
            GradationPipeline(source="image").run(image_context([DetectedRegion(785, None)], calibration=None))

    def test_reuses_existing_session_calibration(self):
        session = AnalysisSession()
        session.load_image("sample.jpg")
        session.begin_calibration((0, 0))
        session.end_calibration((0, 50), 10)

        context = GradationPipeline(source="image").run(
            image_context([DetectedRegion(785, None)], calibration=None, session=session)
        )
        assert context['scale_factor'] == pytest.approx(5.0)

    def test_incomplete_calibration_is_rejected(self):
        with pytest.raises(InvalidCalibrationInput):
            GradationPipeline(source="image").run(
                image_context([DetectedRegion(785, None)], calibration={"start": [0, 0]})
            )

    @pytest.mark.parametrize("reference_length", ["10", True, None, [10]])
    def test_non_numeric_reference_length_is_rejected(self, reference_length):
        calibration = dict(CALIBRATION, reference_length=reference_length)
        with pytest.raises(InvalidCalibrationInput):
            GradationPipeline(source="image").run(
                image_context([DetectedRegion(785, None)], calibration=calibration)
            )

    def test_unknown_source(self):
        with pytest.raises(ValueError):
            GradationPipeline(source="laser")
