from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Sequence

from markov_slm import MarkovError, MarkovModel
from markov_slm.settings import MarkovSettings, load_settings
from markov_slm.tokenizer import TOKENIZER_MODES, tokenize

from helpers.resource_monitor import ResourceMonitor
from log_helpers import configure_library_logging, log, log_verbose


def build_parser(settings: MarkovSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Train a Markov chain snapshot from raw text corpora."
    )
    parser.add_argument(
        "inputs",
        nargs="*",
        help="Text files or directories to ingest. Directories pull in *.txt files.",
    )
    parser.add_argument(
        "--snapshot",
        default=settings.snapshot_path,
        help="Path to the JSON snapshot to create or extend (default: %(default)s).",
    )
    parser.add_argument(
        "--depth",
        type=int,
        default=None,
        help=(
            "Chain depth (prefix length) for a new snapshot. Must match an existing snapshot "
            f"when resuming (default for new snapshots: {settings.depth})."
        ),
    )
    parser.add_argument(
        "--tokenizer",
        choices=TOKENIZER_MODES,
        default=settings.tokenizer,
        help="Split text into characters or word/punctuation tokens (default: %(default)s).",
    )
    parser.add_argument(
        "--lowercase",
        action=argparse.BooleanOptionalAction,
        default=settings.tokenizer_lowercase,
        help="Lowercase text before tokenizing.",
    )
    parser.add_argument(
        "--whole-file",
        action="store_true",
        help="Train each file as one sequence instead of one sequence per non-empty line.",
    )
    parser.add_argument(
        "--encoding",
        default="utf-8",
        help="File encoding used while reading corpora (default: %(default)s).",
    )
    parser.add_argument(
        "--stdin",
        action="store_true",
        help="Read an additional corpus from STDIN.",
    )
    parser.add_argument(
        "--recursive",
        action="store_true",
        help="When a directory is provided, recursively ingest *.txt files.",
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Discard the existing snapshot (if any) before training.",
    )
    parser.add_argument(
        "--profile-ingest",
        action="store_true",
        help="Log elapsed time, CPU and RSS per corpus.",
    )
    return parser


@dataclass(frozen=True)
class Corpus:
    label: str
    text: str


def collect_files(inputs: Sequence[str], recursive: bool) -> List[Path]:
    files: List[Path] = []
    for raw in inputs:
        path = Path(raw).expanduser()
        if path.is_dir():
            pattern = "**/*.txt" if recursive else "*.txt"
            files.extend(sorted(p for p in path.glob(pattern) if p.is_file()))
        elif path.is_file():
            files.append(path)
        else:
            raise FileNotFoundError(f"Input path '{path}' does not exist")
    return files


def iter_corpora(files: Iterable[Path], encoding: str, include_stdin: bool) -> Iterable[Corpus]:
    for path in files:
        yield Corpus(label=str(path), text=path.read_text(encoding=encoding))
    if include_stdin:
        yield Corpus(label="<stdin>", text=sys.stdin.read())


def split_sequences(text: str, whole_file: bool) -> List[str]:
    if whole_file:
        return [text] if text.strip() else []
    return [line for line in (raw.rstrip("\r\n") for raw in text.splitlines()) if line.strip()]


def open_model(snapshot: Path, depth: int | None, default_depth: int, reset: bool) -> MarkovModel:
    if snapshot.exists() and not reset:
        model = MarkovModel.load(snapshot)
        if depth is not None and depth != model.depth:
            raise ValueError(
                f"Snapshot '{snapshot}' was trained with depth={model.depth}; "
                f"rerun with --depth {model.depth} or --reset"
            )
        log(f"[train] Resuming {model!r} from {snapshot}")
        return model
    if reset and snapshot.exists():
        log(f"[train] Resetting snapshot at {snapshot}")
    return MarkovModel(depth if depth is not None else default_depth)


def train_corpus(model: MarkovModel, corpus: Corpus, args: argparse.Namespace) -> int:
    sequences = split_sequences(corpus.text, args.whole_file)
    symbols = 0
    for sequence in sequences:
        tokens = tokenize(sequence, args.tokenizer, lowercase=args.lowercase)
        model.train(tokens)
        symbols += len(tokens)
    log_verbose(
        2,
        f"[train] {corpus.label}: {len(sequences)} sequence(s), {symbols} symbol(s)",
    )
    return symbols


def main() -> None:
    try:
        settings = load_settings()
    except ValueError as exc:
        sys.exit(f"[train] Invalid settings: {exc}")
    parser = build_parser(settings)
    args = parser.parse_args()
    configure_library_logging()
    log_verbose(3, f"[train] Parsed CLI arguments: {vars(args)}")

    if not args.inputs and not args.stdin:
        parser.error("Provide at least one input path or enable --stdin")
    if args.depth is not None and args.depth < 1:
        parser.error(f"--depth must be >= 1 (got {args.depth})")

    snapshot = Path(args.snapshot).expanduser()
    try:
        files = collect_files(args.inputs, args.recursive)
        model = open_model(snapshot, args.depth, settings.depth, args.reset)
    except (MarkovError, ValueError, OSError) as exc:
        parser.error(str(exc))

    monitor = ResourceMonitor() if args.profile_ingest else None
    total_symbols = 0
    corpora = 0
    try:
        for corpus in iter_corpora(files, args.encoding, args.stdin):
            before = monitor.snapshot() if monitor else None
            total_symbols += train_corpus(model, corpus, args)
            corpora += 1
            if monitor and before is not None:
                delta = monitor.delta(before, monitor.snapshot())
                log(f"[profile] {corpus.label}: {monitor.describe(delta)}")
        saved = model.save(snapshot)
    except (MarkovError, ValueError, OSError) as exc:
        parser.error(str(exc))
    log(
        f"[train] Ingested {total_symbols} symbol(s) from {corpora} corpus/corpora; "
        f"{model!r} saved to {saved}"
    )


if __name__ == "__main__":
    main()
