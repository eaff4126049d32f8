from __future__ import annotations

import argparse
import random
import sys
from pathlib import Path
from typing import List, Sequence

from markov_slm import MarkovError, MarkovModel
from markov_slm.settings import MarkovSettings, load_settings
from markov_slm.tokenizer import TOKENIZER_MODES, detokenize, tokenize

from log_helpers import configure_library_logging, log, log_verbose


def build_parser(settings: MarkovSettings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate samples from, or score text against, a trained Markov chain snapshot."
    )
    parser.add_argument(
        "--snapshot",
        default=settings.snapshot_path,
        help="Path to the JSON snapshot produced by train.py (default: %(default)s).",
    )
    parser.add_argument(
        "--samples",
        type=int,
        default=1,
        help="Number of sequences to generate (default: %(default)s). Use 0 to skip generation.",
    )
    parser.add_argument(
        "--min-length",
        type=int,
        default=settings.min_length,
        help="Minimum generated length; best effort (default: %(default)s).",
    )
    parser.add_argument(
        "--max-length",
        type=int,
        default=settings.max_length,
        help="Hard cap on generated length (default: %(default)s).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=settings.seed,
        help="Seed the sampling RNG for reproducible output (default: system entropy).",
    )
    parser.add_argument(
        "--tokenizer",
        choices=TOKENIZER_MODES,
        default=settings.tokenizer,
        help="Tokenizer used for --score/--inspect inputs and for rendering samples (default: %(default)s).",
    )
    parser.add_argument(
        "--lowercase",
        action=argparse.BooleanOptionalAction,
        default=settings.tokenizer_lowercase,
        help="Lowercase --score/--inspect inputs before tokenizing.",
    )
    parser.add_argument(
        "--score",
        action="append",
        default=[],
        metavar="TEXT",
        help="Score TEXT against the model. Repeat to score several inputs.",
    )
    parser.add_argument(
        "--score-file",
        help="Score every non-empty line of a UTF-8 text file.",
    )
    parser.add_argument(
        "--trace",
        action="store_true",
        help="Print the per-transition likelihoods behind every score.",
    )
    parser.add_argument(
        "--inspect",
        action="append",
        default=[],
        metavar="TEXT",
        help="Show the recorded transitions after the prefix TEXT (must tokenize to exactly depth symbols).",
    )
    return parser


def render(symbols: Sequence[object], mode: str) -> str:
    return detokenize(symbols, mode)


def score_inputs(model: MarkovModel, texts: Sequence[str], args: argparse.Namespace) -> None:
    for text in texts:
        tokens = tokenize(text, args.tokenizer, lowercase=args.lowercase)
        value = model.score(tokens)
        log(f"[score] {value:.6f}  {text}")
        if args.trace:
            for step in model.score_transitions(tokens):
                prefix = render(step.prefix, args.tokenizer) or "<boundary>"
                suffix = render([step.suffix], args.tokenizer) or "<boundary>"
                log(f"[trace]   {prefix!r} -> {suffix!r}: {step.likelihood:.6f}", prefix=False)


def inspect_prefixes(model: MarkovModel, texts: Sequence[str], args: argparse.Namespace) -> None:
    for text in texts:
        prefix = tokenize(text, args.tokenizer, lowercase=args.lowercase)
        counts = model.transitions(prefix)
        if not counts:
            log(f"[inspect] {text!r}: no recorded transitions")
            continue
        total = sum(counts.values())
        ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
        log(f"[inspect] {text!r}: {len(ranked)} suffix(es), total={total}")
        for suffix, count in ranked:
            label = render([suffix], args.tokenizer) or "<boundary>"
            log(f"[inspect]   {label!r}: {count} ({count / total:.3f})", prefix=False)


def read_score_file(path: str) -> List[str]:
    text = Path(path).expanduser().read_text(encoding="utf-8")
    return [line for line in text.splitlines() if line.strip()]


def main() -> None:
    try:
        settings = load_settings()
    except ValueError as exc:
        sys.exit(f"[run] Invalid settings: {exc}")
    parser = build_parser(settings)
    args = parser.parse_args()
    configure_library_logging()
    log_verbose(3, f"[run] Parsed CLI arguments: {vars(args)}")

    if args.samples < 0:
        parser.error(f"--samples must be >= 0 (got {args.samples})")
    if args.min_length < 0:
        parser.error(f"--min-length must be >= 0 (got {args.min_length})")
    if args.max_length < args.min_length:
        parser.error(
            f"--max-length must be >= --min-length (got {args.max_length} < {args.min_length})"
        )

    try:
        model = MarkovModel.load(args.snapshot)
        score_texts = list(args.score)
        if args.score_file:
            score_texts.extend(read_score_file(args.score_file))
    except (MarkovError, ValueError, OSError) as exc:
        parser.error(str(exc))
    log(f"[run] Loaded {model!r} from {args.snapshot}")

    rng = random.Random(args.seed)
    if args.seed is not None:
        log(f"[seed] Sampling RNG initialized with seed={args.seed}")
    for idx in range(args.samples):
        sample = model.generate(args.min_length, args.max_length, rng=rng)
        log(f"[sample {idx + 1}] ({len(sample)}) {render(sample, args.tokenizer)}")

    try:
        inspect_prefixes(model, args.inspect, args)
    except ValueError as exc:
        parser.error(str(exc))
    score_inputs(model, score_texts, args)


if __name__ == "__main__":
    main()
