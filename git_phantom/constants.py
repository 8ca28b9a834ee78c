"""Shared constants for git-phantom."""

# Layout under the main repository's git dir
PHANTOM_DIR_PARTS = (".git", "phantom", "worktrees")

# Directory never descended into when expanding "**/" patterns
GIT_METADATA_DIR = ".git"

CONFIG_FILENAME = "phantom.config.json"
WORKTREES_DIRECTORY_ENV = "PHANTOM_WORKTREES_DIRECTORY"

DEFAULT_BASE = "HEAD"
DEFAULT_SHELL = "/bin/sh"

# Length of the short hash used as the branch stand-in for detached worktrees
SHORT_HASH_LENGTH = 7

MAX_NAME_GENERATION_ATTEMPTS = 10

# Word lists for generated worktree names
ADJECTIVES = [
    "brave", "swift", "calm", "bold", "keen", "fair", "warm", "wise",
    "quiet", "lucky", "eager", "gentle", "happy", "jolly", "lively", "proud",
    "silent", "sunny", "tidy", "witty", "amber", "azure", "crimson", "golden",
]
NOUNS = [
    "panda", "falcon", "river", "mountain", "oak", "hawk", "wolf", "fox",
    "bear", "lynx", "crow", "wren", "otter", "heron", "maple", "cedar",
    "comet", "harbor", "meadow", "canyon", "glacier", "willow", "badger", "raven",
]
VERBS = [
    "runs", "jumps", "sings", "dances", "wanders", "climbs", "swims", "glides",
    "dreams", "waits", "builds", "hunts",
]
