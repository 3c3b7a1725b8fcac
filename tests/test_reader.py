"""
Tests for recorded measurement loading and simulation.
"""

import numpy as np
import pytest

from room_trilateration.reader import MeasurementReader
from room_trilateration.simulate import simulate_distances

RECORDING = """timestamp,device_id,anchor,distance
2024-06-02T10:00:00,phone,kitchen,4.1
2024-06-02T10:00:00,phone,living,2.2
2024-06-02T10:00:05,phone,kitchen,4.9
2024-06-02T10:00:05,watch,bedroom,1.5
2024-06-02T10:00:06,phone,living,2.0
"""


@pytest.fixture
def recording(tmp_path):
    path = tmp_path / "session.csv"
    path.write_text(RECORDING)
    return path


class TestMeasurementReader:
    """Test loading recorded distances."""

    def test_latest_distances(self, recording):
        """Test that the latest distance per anchor is returned."""
        reader = MeasurementReader(str(recording))

        assert reader.get_latest_distances("phone") == {"kitchen": 4.9, "living": 2.0}
        assert reader.get_device_ids() == ["phone", "watch"]

    def test_history(self, recording):
        """Test the time-ordered distance history."""
        reader = MeasurementReader(str(recording))

        assert reader.get_distance_history("phone") == {"kitchen": [4.1, 4.9], "living": [2.2, 2.0]}

    def test_directory(self, recording, tmp_path):
        """Test loading every CSV file in a directory."""
        (tmp_path / "more.csv").write_text("timestamp,device_id,anchor,distance\n"
                                           "2024-06-02T10:01:00,tag,kitchen,3.3\n")
        reader = MeasurementReader(str(tmp_path))

        assert reader.get_all_latest_distances()["tag"] == {"kitchen": 3.3}
        assert len(reader.load_all_data()) == 6

    def test_missing_columns(self, tmp_path):
        """Test that files without the required columns are rejected."""
        path = tmp_path / "bad.csv"
        path.write_text("device_id,distance\nphone,1.0\n")

        with pytest.raises(ValueError, match="anchor"):
            MeasurementReader(str(path)).load_all_data()


class TestSimulateDistances:
    """Test synthetic distance generation."""

    def test_exact(self, house_anchors):
        """Test noise-free distances."""
        distances = simulate_distances(house_anchors, (-0.92, 4.99))

        assert distances["kitchen"] == pytest.approx(4.0)
        assert set(distances) == set(house_anchors)

    def test_noise_is_reproducible_and_non_negative(self, house_anchors):
        """Test seeded noise and clipping at zero."""
        first = simulate_distances(house_anchors, (-0.92, 0.99), 0.5, rng=np.random.default_rng(1))
        second = simulate_distances(house_anchors, (-0.92, 0.99), 0.5, rng=np.random.default_rng(1))

        assert first == second
        assert all(d >= 0 for d in first.values())

    def test_negative_noise_rejected(self, house_anchors):
        with pytest.raises(ValueError):
            simulate_distances(house_anchors, (0, 0), -1.0)
