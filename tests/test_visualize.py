import numpy as np

from frames import blank
from visualize import render_preview


def test_preview_draws_on_a_copy():
    frame = blank()

    out = render_preview(frame, {"blue": (50, 50), "red": None}, recording=True, frames_written=3, max_frames=450)

    assert out is not frame
    assert out.shape == frame.shape
    assert not frame.any()
    assert out[50, 50].any()
