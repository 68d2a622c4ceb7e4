import io
from typing import Callable, Dict, List, Optional, Tuple, Union

import pytest
from rich.console import Console

Response = Union[Tuple[bool, str], Callable[[List[str]], Tuple[bool, str]]]


class FakeRunner:
    """
    Stand-in for CommandRunner.

    Responses are looked up by the full argv tuple first, then by the
    program name. Unknown commands fail as if they were not installed.
    """

    def __init__(self, responses: Optional[Dict[object, Response]] = None, which=()):
        self.responses = dict(responses or {})
        self.calls: List[List[str]] = []
        self.streamed: List[List[str]] = []
        self.envs: List[Optional[dict]] = []
        self._which = set(which)

    def _lookup(self, argv: List[str]) -> Tuple[bool, str]:
        resp = self.responses.get(tuple(argv), self.responses.get(argv[0], (False, "")))
        if callable(resp):
            return resp(argv)
        return resp

    def run(self, argv, cwd=None):
        self.calls.append(list(argv))
        return self._lookup(list(argv))

    def succeeds(self, argv, cwd=None):
        return self.run(argv, cwd=cwd)[0]

    def stream(self, argv, cwd=None, env=None):
        self.streamed.append(list(argv))
        self.envs.append(dict(env) if env else None)
        return self._lookup(list(argv))[0]

    def which(self, name):
        return name in self._which


def scripted(*answers: str) -> Callable[[str], str]:
    """A prompt() replacement that replays *answers*, then hits EOF."""
    queue = list(answers)

    def prompt(message: str) -> str:
        if not queue:
            raise EOFError
        return queue.pop(0)

    return prompt


@pytest.fixture
def make_runner():
    return FakeRunner


@pytest.fixture
def console() -> Console:
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture
def output(console) -> Callable[[], str]:
    return lambda: console.file.getvalue()


@pytest.fixture
def prompt_with():
    return scripted
