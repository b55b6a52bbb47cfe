"""
Tests for the sequential pipeline executor.
"""

import logging
import re

import numpy as np
import pytest

from pixelnodes import Image, NodeBoundsError, PipelineRunError, settings
from pixelnodes.nodes import (
    Crop,
    GreyScale,
    Noise,
    Normalise,
    Pipeline,
    StepReport,
    Vignette,
    run_pipeline,
)


@pytest.fixture
def square_image() -> Image:
    """Create a 4x4 image with a horizontal color gradient."""
    pixels = np.zeros((4, 4, 3), dtype=np.uint8)
    for x in range(4):
        pixels[:, x] = [x * 60, 255 - x * 60, 30]
    return Image(pixels)


class TestRunPipeline:
    """Tests for executing node sequences."""

    def test_empty_pipeline_is_identity(self, square_image):
        before = square_image.copy()
        result = run_pipeline(square_image, [])
        assert result == before

    def test_greyscale_end_to_end(self, solid_red_image):
        result = run_pipeline(solid_red_image, [GreyScale()])
        assert result.size == (2, 2)
        values = {result.get_pixel(x, y) for x in range(2) for y in range(2)}
        assert values == {(54, 54, 54, 255)}

    def test_steps_run_in_order(self, square_image):
        """Crop first, then grayscale: the output of one step feeds the next."""
        result = run_pipeline(square_image, [Crop(2, 0, 2, 2), GreyScale()])
        expected = GreyScale().process(Crop(2, 0, 2, 2).process(square_image))
        assert result == expected
        assert result.size == (2, 2)

    def test_input_image_is_untouched(self, square_image):
        before = square_image.copy()
        run_pipeline(square_image, [GreyScale(), Normalise(), Vignette(), Noise(0.3)])
        assert square_image == before

    def test_accepts_any_iterable(self, square_image):
        result = run_pipeline(square_image, (node for node in [GreyScale()]))
        assert result == GreyScale().process(square_image)

    def test_pipeline_run(self, square_image):
        pipeline = Pipeline.parse('node=crop origin=1x1 size=3x3\nnode=vignette')
        result = pipeline.run(square_image)
        assert result.size == (3, 3)


class TestStepReports:
    """Tests for per-step diagnostics."""

    def test_on_step_receives_reports(self, square_image):
        reports = []
        run_pipeline(square_image, [Crop(0, 0, 2, 3), GreyScale()], on_step=reports.append)
        assert [r.step for r in reports] == [1, 2]
        assert reports[0].name == 'Crop'
        assert reports[0].other_info == '(origin=(0,0), size=(2,3))'
        assert reports[0].input_description == 'Image (RGBA 4x4)'
        assert reports[0].output_description == 'Image (RGBA 2x3)'
        assert reports[1].input_description == 'Image (RGBA 2x3)'
        assert reports[1].artifact is None

    def test_report_lines(self):
        report = StepReport(
            step=1,
            name='Crop',
            other_info='(origin=(1,2), size=(3,4))',
            input_description='Image (RGBA 10x10)',
            output_description='Image (RGBA 3x4)',
        )
        assert report.to_lines() == [
            '               Node: Crop (origin=(1,2), size=(3,4))',
            '   Input dimensions: Image (RGBA 10x10)',
            '  Output dimensions: Image (RGBA 3x4)',
        ]
        assert report.header_lines() == report.to_lines()[:2]
        assert report.result_lines() == report.to_lines()[2:]

    def test_report_lines_with_artifact(self, tmp_path):
        report = StepReport(step=2, name='GreyScale', artifact=tmp_path / 'output2.png',
                            artifact_bytes=1_234_567)
        lines = report.to_lines()
        assert lines[0] == '               Node: GreyScale'
        assert lines[3] == f"            Save as: {tmp_path / 'output2.png'}"
        assert lines[4] == '        Output size: 1.235 MB'

    def test_logging(self, square_image, caplog):
        with caplog.at_level(logging.INFO, logger='pixelnodes.nodes.executor'):
            run_pipeline(square_image, [Crop(0, 0, 2, 2)], log_steps=True)
        assert 'Node: Crop (origin=(0,0), size=(2,2))' in caplog.text
        assert 'Input dimensions: Image (RGBA 4x4)' in caplog.text
        assert 'Output dimensions: Image (RGBA 2x2)' in caplog.text
        assert 'Finished processing 1 node(s)' in caplog.text

    def test_no_step_logging_by_default(self, square_image, caplog):
        with caplog.at_level(logging.INFO, logger='pixelnodes.nodes.executor'):
            run_pipeline(square_image, [GreyScale()])
        assert 'Node:' not in caplog.text


class TestIntermediateSaving:
    """Tests for persisting intermediate results."""

    def test_saves_every_step(self, square_image, tmp_path):
        save_dir = tmp_path / 'intermediate'
        reports = []
        result = run_pipeline(
            square_image,
            [GreyScale(), Crop(0, 0, 2, 2)],
            save_intermediate=True,
            save_dir=save_dir,
            on_step=reports.append,
        )
        assert save_dir.is_dir()
        assert (save_dir / 'output1.png').exists()
        assert (save_dir / 'output2.png').exists()
        assert Image(save_dir / 'output2.png') == result
        assert reports[0].artifact == save_dir / 'output1.png'
        assert reports[0].artifact_bytes == (save_dir / 'output1.png').stat().st_size

    def test_logs_artifact_size(self, square_image, tmp_path, caplog):
        with caplog.at_level(logging.INFO, logger='pixelnodes.nodes.executor'):
            run_pipeline(square_image, [GreyScale()], log_steps=True,
                         save_intermediate=True, save_dir=tmp_path / 'out')
        assert 'Save as:' in caplog.text
        assert re.search(r'Output size: \d+\.\d{3} MB', caplog.text)

    def test_directory_not_created_without_saving(self, square_image, tmp_path):
        save_dir = tmp_path / 'unused'
        run_pipeline(square_image, [GreyScale()], save_dir=save_dir)
        assert not save_dir.exists()

    def test_existing_directory_is_reused(self, square_image, tmp_path):
        run_pipeline(square_image, [GreyScale()], save_intermediate=True, save_dir=tmp_path)
        assert (tmp_path / 'output1.png').exists()


class TestFailures:
    """Tests for aborting runs."""

    def test_bounds_error_aborts_run(self, square_image):
        reports = []
        with pytest.raises(PipelineRunError) as excinfo:
            run_pipeline(
                square_image,
                [GreyScale(), Crop(3, 3, 5, 5), Vignette()],
                on_step=reports.append,
            )
        assert excinfo.value.step == 2
        assert excinfo.value.node_name == 'Crop'
        assert isinstance(excinfo.value.__cause__, NodeBoundsError)
        assert [r.step for r in reports] == [1]

    def test_no_artifact_for_failing_step(self, square_image, tmp_path):
        with pytest.raises(PipelineRunError):
            run_pipeline(square_image, [GreyScale(), Crop(9, 9, 1, 1)],
                         save_intermediate=True, save_dir=tmp_path)
        assert (tmp_path / 'output1.png').exists()
        assert not (tmp_path / 'output2.png').exists()

    def test_resource_error_aborts_run(self, square_image, tmp_path):
        blocker = tmp_path / 'not_a_directory'
        blocker.write_text('occupied')
        with pytest.raises(PipelineRunError) as excinfo:
            run_pipeline(square_image, [GreyScale()], save_intermediate=True,
                         save_dir=blocker / 'nested')
        assert excinfo.value.step == 1
        assert isinstance(excinfo.value.__cause__, OSError)

    def test_unsupported_artifact_extension_aborts_run(self, square_image, tmp_path, monkeypatch):
        monkeypatch.setattr(settings, 'IMAGE_EXTENSION', 'tiff')
        with pytest.raises(PipelineRunError) as excinfo:
            run_pipeline(square_image, [GreyScale(), Vignette()], save_intermediate=True,
                         save_dir=tmp_path)
        assert excinfo.value.step == 1
        assert excinfo.value.node_name == 'GreyScale'
        assert isinstance(excinfo.value.__cause__, ValueError)

    def test_failing_step_is_logged_before_it_runs(self, square_image, caplog):
        with caplog.at_level(logging.INFO, logger='pixelnodes.nodes.executor'):
            with pytest.raises(PipelineRunError):
                run_pipeline(square_image, [GreyScale(), Crop(3, 3, 5, 5)], log_steps=True)
        assert 'Node: Crop (origin=(3,3), size=(5,5))' in caplog.text
        assert caplog.text.count('Input dimensions: Image (RGBA 4x4)') == 2
        assert caplog.text.count('Output dimensions:') == 1
