#Error types shared by the generator, the searches and the run coordinator

from __future__ import annotations


class MazeError(Exception):
    pass


class ConfigurationError(MazeError, ValueError):
    #Bad grid size or unknown algorithm, raised before anything is generated or started
    pass


class ReentrancyError(MazeError, RuntimeError):
    #A run was requested while another run (or a compare batch) is still active
    pass


class UnreachableGoalError(MazeError):
    #Attached to a RunResult whose frontier ran dry before the goal was closed
    #Never raised across the event boundary, the run still completes with an empty path

    def __init__(self, algorithm: str, explored: int):
        super().__init__(f"{algorithm} exhausted its frontier after {explored} nodes without reaching the goal")
        self.algorithm = algorithm
        self.explored = explored
