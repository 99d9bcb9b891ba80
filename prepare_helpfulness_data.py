"""
Prepare helpfulness regression data from a raw review corpus.

Reads the corpus, parses it into reviews, checks the corpus statistics,
keeps reviews with enough votes, cleans their text, and saves the reviews
and a train/validation split.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from reviewcorpus import (
    CorpusError,
    CorpusReader,
    InvertedVotePolicy,
    PersistenceManager,
    StatsMismatchError,
    ZeroVotePolicy,
    compute_stats,
    feature_label_pairs,
    filter_by_min_votes,
    parse,
    train_validation_split,
    validate_stats,
)
from reviewcorpus import settings

logger = logging.getLogger("prepare_helpfulness_data")

# train_test_split needs at least one review on each side
MIN_SPLIT_REVIEWS = 2


def setup_logging(log_level: str = settings.LOG_LEVEL):
    """Configure logging for the entire application."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format=settings.LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)]
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Parse a review corpus and prepare helpfulness labels",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Parse the Fine Foods corpus and check it against the published counts
  python prepare_helpfulness_data.py data/finefoods.txt.gz --reference-finefoods \\
                                     --exclude-inverted-votes

  # Keep reviews without votes and write Parquet
  python prepare_helpfulness_data.py data/finefoods.txt --keep-zero-votes \\
                                     --min-votes 0 --format parquet
        """
    )

    parser.add_argument("corpus", help="Path to the corpus file (.txt or .gz)")
    parser.add_argument("--output-dir", default=str(Path.cwd() / settings.DATA_DIRNAME),
                        help="Directory for processed data (default: %(default)s)")
    parser.add_argument("--block-size", type=int, default=settings.BLOCK_SIZE,
                        help="Lines per review (default: %(default)s)")
    parser.add_argument("--min-votes", type=int, default=settings.DEFAULT_MIN_VOTES,
                        help="Minimum total votes per review (default: %(default)s)")
    parser.add_argument("--keep-zero-votes", action="store_true",
                        help="Keep reviews without votes (ratio set to 0.0)")
    parser.add_argument("--exclude-inverted-votes", action="store_true",
                        help="Drop reviews with more helpful votes than total "
                             "votes instead of failing (they still count in "
                             "the corpus statistics)")
    parser.add_argument("--validation-size", type=float,
                        default=settings.DEFAULT_VALIDATION_SIZE,
                        help="Validation proportion (default: %(default)s)")
    parser.add_argument("--seed", type=int, default=settings.RANDOM_SEED,
                        help="Random seed for the split (default: %(default)s)")
    parser.add_argument("--expected-reviews", type=int, help="Reference review count")
    parser.add_argument("--expected-products", type=int, help="Reference product count")
    parser.add_argument("--expected-users", type=int, help="Reference user count")
    parser.add_argument("--reference-finefoods", action="store_true",
                        help="Check against the published Fine Foods counts")
    parser.add_argument("--format", choices=["csv", "parquet"], default="csv",
                        help="Output format (default: %(default)s)")
    parser.add_argument("--no-progress", action="store_true",
                        help="Disable progress bars")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL,
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level (default: %(default)s)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.log_level)
    show_progress = not args.no_progress

    expected = {
        'expected_reviews': args.expected_reviews,
        'expected_products': args.expected_products,
        'expected_users': args.expected_users,
    }
    if args.reference_finefoods:
        reference = settings.FINEFOODS_REFERENCE
        expected = {
            'expected_reviews': reference['num_reviews'],
            'expected_products': reference['num_products'],
            'expected_users': reference['num_users'],
        }

    policy = ZeroVotePolicy.KEEP if args.keep_zero_votes else ZeroVotePolicy.EXCLUDE
    inverted_policy = (InvertedVotePolicy.EXCLUDE if args.exclude_inverted_votes
                       else InvertedVotePolicy.RAISE)

    print("=" * 80)
    print("Preparing helpfulness data")
    print("=" * 80)

    try:
        reader = CorpusReader(args.corpus)
        lines = reader.read_lines(show_progress=show_progress)

        # Statistics are checked on the full corpus, before any exclusion
        inverted_blocks = []
        all_reviews = parse(lines, block_size=args.block_size,
                            zero_vote_policy=ZeroVotePolicy.KEEP,
                            inverted_vote_policy=inverted_policy,
                            show_progress=show_progress,
                            excluded=inverted_blocks)
        stats = compute_stats(all_reviews, excluded_blocks=inverted_blocks)
        print(f"\n[1] Corpus: {stats.num_reviews} reviews, "
              f"{stats.num_products} products, {stats.num_users} users")
        if inverted_blocks:
            logger.warning(f"Excluded {len(inverted_blocks)} reviews with more "
                           f"helpful votes than total votes")
        validate_stats(stats, **expected)

        if policy == ZeroVotePolicy.EXCLUDE:
            reviews = [review for review in all_reviews if review.has_votes]
        else:
            reviews = all_reviews
        reviews = filter_by_min_votes(reviews, args.min_votes)
        print(f"[2] Labeled reviews with >= {args.min_votes} votes: {len(reviews)}")
        if len(reviews) < MIN_SPLIT_REVIEWS:
            logger.error(f"Not enough labeled reviews to split: {len(reviews)} "
                         f"(need at least {MIN_SPLIT_REVIEWS})")
            return 1

        texts, labels = feature_label_pairs(reviews)
        train_texts, val_texts, train_labels, val_labels = train_validation_split(
            texts, labels,
            validation_size=args.validation_size,
            random_seed=args.seed,
        )
        print(f"[3] Split: {len(train_texts)} train, {len(val_texts)} validation")

        persistence = PersistenceManager(args.output_dir)
        persistence.save_reviews(reviews, format=args.format)
        persistence.save_split(train_texts, train_labels, val_texts, val_labels,
                               format=args.format)

    except FileNotFoundError as e:
        logger.error(str(e))
        return 1
    except CorpusError as e:
        logger.error(f"Corpus error: {e}")
        return 1
    except StatsMismatchError as e:
        logger.error(str(e))
        return 1
    except ValueError as e:
        logger.error(f"Invalid argument: {e}")
        return 1
    except OSError as e:
        logger.error(f"Could not write output to {args.output_dir}: {e}")
        return 1

    print(f"\n✓ Data written to {args.output_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
