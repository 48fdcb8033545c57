"""Measures the time spent reconstructing events."""

import time
from dataclasses import dataclass


@dataclass
class Time:
    """Wall and CPU time pair.

    Attributes
    ----------
    wall : float
         Wall time in seconds
    cpu : float
         CPU time in seconds
    """

    wall: float = 0.0
    cpu: float = 0.0

    def __add__(self, other):
        return Time(wall=self.wall + other.wall, cpu=self.cpu + other.cpu)

    def __sub__(self, other):
        return Time(wall=self.wall - other.wall, cpu=self.cpu - other.cpu)

    @classmethod
    def current(cls):
        """Returns the current time (wall and cpu).

        Returns
        -------
        Time
           Current time
        """
        return cls(time.time(), time.process_time())


class Stopwatch:
    """Holds timing information for a specific process."""

    def __init__(self):
        """Give default values to the underlying class attributes."""
        self._start = None
        self.time = Time()
        self.time_sum = Time()
        self.count = 0

    @property
    def running(self):
        """Whether the stopwatch is currently running."""
        return self._start is not None

    def start(self):
        """Starts the clock."""
        if self.running:
            raise ValueError("Cannot restart a watch that has not been stopped.")

        self._start = Time.current()

    def stop(self):
        """Stops the clock and accumulates the elapsed time."""
        if not self.running:
            raise ValueError("Cannot stop a watch that has not been started.")

        self.time = Time.current() - self._start
        self.time_sum += self.time
        self.count += 1
        self._start = None


class StopwatchManager:
    """Organizes a set of named stopwatches."""

    def __init__(self):
        """Initalize the basic private stopwatch attributes."""
        self._watch = {}

    def keys(self):
        """List of all initialized stopwatch tags."""
        return self._watch.keys()

    def items(self):
        """List of (key, stopwatch) pairs."""
        return self._watch.items()

    def initialize(self, key):
        """Initialize one stopwatch, resetting it if it already exists.

        Parameters
        ----------
        key : Union[str, List[str]]
            Key or list of keys to initialize a `Stopwatch` for
        """
        keys = [key] if isinstance(key, str) else key
        for k in keys:
            self._watch[k] = Stopwatch()

    def _get(self, key):
        """Fetches a stopwatch, throws if it does not exist."""
        if key not in self._watch:
            raise KeyError(f"No stopwatch initialized under the name: {key}")

        return self._watch[key]

    def start(self, key):
        """Starts the stopwatch of a given key.

        Parameters
        ----------
        key : str
            Key for which to start the clock
        """
        self._get(key).start()

    def stop(self, key):
        """Stops the stopwatch of a given key.

        Parameters
        ----------
        key : str
            Key for which to stop the clock
        """
        self._get(key).stop()

    def time(self, key):
        """Returns the time recorded between the last start and stop.

        Parameters
        ----------
        key : str
            Key for which to return the time

        Returns
        -------
        Time
            Execution time of one iteration of a process
        """
        return self._get(key).time

    def time_sum(self, key):
        """Returns the sum of times recorded between each start/stop pairs.

        Parameters
        ----------
        key : str
            Key for which to return the time

        Returns
        -------
        Time
            Execution time of all iterations of a process so far
        """
        return self._get(key).time_sum

    def times_sum(self):
        """Returns the cumulative time of each stopwatch as a dictionary.

        Returns
        -------
        Dict[str, Time]
            Execution time of all iterations of each process so far
        """
        return {key: watch.time_sum for key, watch in self.items()}
