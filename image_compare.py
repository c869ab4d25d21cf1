"""
Public entry points: compare two images, or one target against many candidates.

Also usable from the command line:
    python image_compare.py target.png other1.png https://example.com/other2.jpg
"""

from __future__ import annotations

import argparse
import asyncio
import csv
import logging
import sys
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from algorithm_base import Algorithm
from config import CompareConfig
from errors import BatchItemError, ImageCompareError
from image_source import ImageSource, as_source, describe_source
from pixel_matcher import Pixel_Matcher, default_algorithm
from resolver import ImageSourceResolver

logger = logging.getLogger(__name__)


async def compare_images(
    src1: ImageSource,
    src2: ImageSource,
    algorithm: Optional[Algorithm] = None,
    *,
    resolver: Optional[ImageSourceResolver] = None,
    config: Optional[CompareConfig] = None,
) -> float:
    """
    Compare two images with the given algorithm (Pixel_Matcher by default).

    Args:
        src1: First image, any ImageSource variant
        src2: Second image, any ImageSource variant
        algorithm: Comparison strategy
        resolver: Source resolver (built from config when omitted)
        config: Settings used to build the default resolver

    Returns:
        Difference score as documented by the algorithm

    Raises:
        UnsupportedSourceError, DecodeError, NetworkError, DimensionMismatchError
    """
    algorithm = algorithm or default_algorithm()
    resolver = resolver or ImageSourceResolver(config)

    a, b = await _gather_or_cancel([resolver.resolve(src1), resolver.resolve(src2)])
    return algorithm.compare(a, b)


async def _gather_or_cancel(aws) -> list:
    """Await all of aws concurrently; on the first error cancel and drain the rest."""
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return await asyncio.gather(*tasks)
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


@dataclass
class ComparisonOutcome:
    """Result of one candidate in list_compare_detailed."""
    index: int
    candidate: ImageSource
    score: Optional[float] = None
    error: Optional[ImageCompareError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _batch_setup(resolver, config):
    if resolver is None:
        resolver = ImageSourceResolver(config)
    return resolver, asyncio.Semaphore(resolver.config.max_concurrency)


async def list_compare(
    target: ImageSource,
    candidates: Iterable[ImageSource],
    algorithm: Optional[Algorithm] = None,
    *,
    resolver: Optional[ImageSourceResolver] = None,
    config: Optional[CompareConfig] = None,
) -> List[float]:
    """
    Compare target against every candidate concurrently.

    Scores come back in the order of candidates, whatever order the
    comparisons finish in. The target is resolved again for each candidate.
    The first failure cancels the comparisons still running and is raised.

    Returns:
        One score per candidate

    Raises:
        BatchItemError: a candidate failed; index/candidate identify it and
                        the original error is chained as __cause__
    """
    candidates = list(candidates)
    if not candidates:
        return []
    algorithm = algorithm or default_algorithm()
    resolver, limit = _batch_setup(resolver, config)

    async def run(index: int, candidate: ImageSource) -> float:
        async with limit:
            try:
                score = await compare_images(target, candidate, algorithm, resolver=resolver)
            except Exception as err:
                raise BatchItemError(index, candidate, err) from err
        logger.debug("Candidate #%d (%s): %.6f", index, describe_source(candidate), score)
        return score

    return await _gather_or_cancel([run(i, c) for i, c in enumerate(candidates)])


async def list_compare_detailed(
    target: ImageSource,
    candidates: Iterable[ImageSource],
    algorithm: Optional[Algorithm] = None,
    *,
    resolver: Optional[ImageSourceResolver] = None,
    config: Optional[CompareConfig] = None,
) -> List[ComparisonOutcome]:
    """
    Like list_compare, but a failing candidate does not abort the batch.

    Library errors are recorded as they are; any other exception (from a
    custom Algorithm, for example) is recorded wrapped in a BatchItemError.

    Returns:
        One ComparisonOutcome per candidate, in input order, holding either
        a score or the error of that candidate
    """
    candidates = list(candidates)
    algorithm = algorithm or default_algorithm()
    resolver, limit = _batch_setup(resolver, config)

    async def run(index: int, candidate: ImageSource) -> ComparisonOutcome:
        async with limit:
            try:
                score = await compare_images(target, candidate, algorithm, resolver=resolver)
            except Exception as err:
                if not isinstance(err, ImageCompareError):
                    wrapped = BatchItemError(index, candidate, err)
                    wrapped.__cause__ = err
                    err = wrapped
                logger.warning("Candidate #%d (%s) failed: %s", index, describe_source(candidate), err)
                return ComparisonOutcome(index, candidate, error=err)
        return ComparisonOutcome(index, candidate, score=score)

    return await _gather_or_cancel([run(i, c) for i, c in enumerate(candidates)])


# -----------------------------
# command line
# -----------------------------
def write_results_csv(csv_path: Path, outcomes: Sequence[ComparisonOutcome]):
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow(["index", "source", "score", "error"])
        for o in outcomes:
            w.writerow([
                o.index,
                describe_source(o.candidate),
                "" if o.score is None else f"{o.score:.6f}",
                "" if o.error is None else str(o.error),
            ])


async def _run_cli(args, config: CompareConfig) -> List[ComparisonOutcome]:
    target = as_source(args.target)
    candidates = [as_source(c) for c in args.candidates]
    algorithm = Pixel_Matcher(tolerance=args.tolerance)
    resolver = ImageSourceResolver(config)

    if args.keep_going:
        return await list_compare_detailed(target, candidates, algorithm, resolver=resolver)

    scores = await list_compare(target, candidates, algorithm, resolver=resolver)
    return [ComparisonOutcome(i, c, score=s) for i, (c, s) in enumerate(zip(candidates, scores))]


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Compute pixel difference scores between images.")

    parser.add_argument("target", help="Target image (file path or http(s) URL)")
    parser.add_argument("candidates", nargs="+", help="Images compared against the target")

    parser.add_argument("--tolerance", type=float, default=0.0, help="Per-channel normalized differences at or below this value are ignored. Default 0.0")
    parser.add_argument("--timeout", type=float, default=None, help="Network fetch timeout in seconds (default: IMAGE_COMPARE_FETCH_TIMEOUT or 30)")
    parser.add_argument("--max_concurrency", type=int, default=None, help="Maximum comparisons in flight (default: IMAGE_COMPARE_MAX_CONCURRENCY or 8)")
    parser.add_argument("--keep_going", action="store_true", help="Report per-candidate errors instead of stopping at the first failure")
    parser.add_argument("--csv", default="", help="Write results to this CSV file")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        overrides = {}
        if args.timeout is not None:
            overrides["fetch_timeout"] = args.timeout
        if args.max_concurrency is not None:
            overrides["max_concurrency"] = args.max_concurrency
        config = replace(CompareConfig.from_env(), **overrides)
        outcomes = asyncio.run(_run_cli(args, config))
    except ImageCompareError as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1
    except ValueError as err:
        parser.error(str(err))

    print(f"Target: {args.target}")
    for o in outcomes:
        label = describe_source(o.candidate)
        if o.ok:
            print(f"[{o.index}] {o.score:.6f}  {label}")
        else:
            print(f"[{o.index}] ERROR     {label}: {o.error}")

    if args.csv:
        csv_path = Path(args.csv)
        write_results_csv(csv_path, outcomes)
        print(f"Results CSV written: {csv_path}")

    return 0 if all(o.ok for o in outcomes) else 1


if __name__ == "__main__":
    sys.exit(main())
