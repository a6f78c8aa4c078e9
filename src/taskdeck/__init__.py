"""taskdeck - personal task tracker."""
