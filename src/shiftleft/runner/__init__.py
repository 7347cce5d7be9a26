"""Runners for prerequisites, setup stages and checks."""

from shiftleft.runner.check import CheckRunner, ExternalCheck
from shiftleft.runner.prerequisite import check_prerequisite
from shiftleft.runner.stage import StageRunner

__all__ = ["CheckRunner", "ExternalCheck", "StageRunner", "check_prerequisite"]
