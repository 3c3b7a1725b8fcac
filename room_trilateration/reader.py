"""
Loading of recorded distance measurements from CSV files.
"""

import glob
import os
from typing import Dict, List

import pandas as pd

REQUIRED_COLUMNS = {'timestamp', 'device_id', 'anchor', 'distance'}


class MeasurementReader:
    """Handles loading of recorded distance measurements.

    Each CSV file holds rows of ``timestamp, device_id, anchor, distance``.
    A single file or a directory of files can be given.
    """

    def __init__(self, path: str = "data"):
        """
        Initialize the measurement reader.

        Args:
            path: CSV file, or directory containing CSV files
        """
        self.path = path
        self.data = pd.DataFrame(columns=sorted(REQUIRED_COLUMNS))
        self._loaded = False

    def load_all_data(self) -> pd.DataFrame:
        """
        Load all measurements, sorted by timestamp.

        Raises:
            ValueError: If a file lacks one of the required columns
        """
        if os.path.isdir(self.path):
            csv_files = sorted(glob.glob(os.path.join(self.path, "*.csv")))
        else:
            csv_files = [self.path]

        frames = []
        for file_path in csv_files:
            df = pd.read_csv(file_path)
            df.columns = df.columns.str.strip()
            missing = REQUIRED_COLUMNS - set(df.columns)
            if missing:
                raise ValueError(f"{file_path} is missing columns: {', '.join(sorted(missing))}")

            frames.append(pd.DataFrame({
                'timestamp': pd.to_datetime(df['timestamp']),
                'device_id': df['device_id'].astype(str).str.strip(),
                'anchor': df['anchor'].astype(str).str.strip(),
                'distance': pd.to_numeric(df['distance'], errors='coerce'),
            }))

        if frames:
            self.data = pd.concat(frames, ignore_index=True).sort_values('timestamp', kind='stable')
        self._loaded = True
        return self.data

    def _ensure_loaded(self) -> pd.DataFrame:
        if not self._loaded:
            self.load_all_data()
        return self.data

    def get_device_ids(self) -> List[str]:
        """All device ids present in the recordings, sorted."""
        return sorted(self._ensure_loaded()['device_id'].unique().tolist())

    def get_distance_history(self, device_id: str) -> Dict[str, List[float]]:
        """
        Get all recorded distances for a device.

        Args:
            device_id: Device to look up

        Returns:
            Dictionary mapping anchor ids to their distances in time order
        """
        data = self._ensure_loaded()
        device_data = data[data['device_id'] == device_id]
        return {anchor: group['distance'].tolist() for anchor, group in device_data.groupby('anchor')}

    def get_latest_distances(self, device_id: str) -> Dict[str, float]:
        """
        Get the latest distance from each anchor for a device.

        Args:
            device_id: Device to look up

        Returns:
            Dictionary mapping anchor ids to their latest distance
        """
        data = self._ensure_loaded()
        device_data = data[data['device_id'] == device_id]
        latest = device_data.groupby('anchor')['distance'].last()
        return {anchor: float(distance) for anchor, distance in latest.items()}

    def get_all_latest_distances(self) -> Dict[str, Dict[str, float]]:
        """Latest distance map for every recorded device."""
        return {device_id: self.get_latest_distances(device_id) for device_id in self.get_device_ids()}
