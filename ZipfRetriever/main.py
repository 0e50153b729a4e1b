import argparse
import logging
import sys
from typing import List

from ZipfRetriever.config import get_setting, load_config
from ZipfRetriever.errors import ConfigurationError
from ZipfRetriever.index_manager import IndexManager
from ZipfRetriever.log_setup import configure_logging
from ZipfRetriever.tfidf_search.vector_space import SearchResult
from ZipfRetriever.zipf import StrategyKind


def preview(text: str, length: int) -> str:
    """Single-line excerpt of a document for result listings."""
    snippet = " ".join((text or "").split())
    if len(snippet) > length:
        return snippet[:length] + "..."
    return snippet


def display_results(results: List[SearchResult], preview_length: int = 150):
    """Display search results in a formatted way"""
    if not results:
        print("\nNo results found.")
        return

    print("\nSEARCH RESULTS:")
    print("=" * 60)

    for i, (doc, score) in enumerate(results):
        print(f"{i+1}. {doc.file_name} (id {doc.id})")
        print(f"   Similarity: {score:.4f}")

        content_snippet = preview(doc.raw_text, preview_length)
        if content_snippet:
            print(f"   Content: {content_snippet}")

        print()


def display_statistics(manager: IndexManager):
    stats = manager.stats()
    print("\nINDEX STATISTICS:")
    print("=" * 60)
    print(f"Documents:              {stats.document_count}")
    print(f"Terms:                  {stats.term_count}")
    print(f"Zipf applied:           {'yes' if stats.zipf_applied else 'no'}")
    if stats.zipf_applied:
        print(f"Zipf strategy:          {stats.strategy} ({stats.percentile}%)")
    print(f"Vector sorted:          {'yes' if stats.is_sorted else 'no'}")
    print(f"Avg terms per document: {stats.average_terms_per_document:.2f}")
    print(f"Estimated memory:       {stats.estimated_memory_kb} KB")
    if manager.current_directory:
        print(f"Corpus directory:       {manager.current_directory}")


def main(argv=None):
    # Parse command-line arguments
    parser = argparse.ArgumentParser(
        description='ZipfRetriever - TF-IDF Search with Zipf Vocabulary Pruning'
    )
    parser.add_argument('--documents', help='Directory with the .txt corpus to index')
    parser.add_argument('--index', help='Load a previously saved binary index')
    parser.add_argument('--save', help='Save the index to this file after building/loading')
    parser.add_argument('--percentile', type=int, help='Zipf pruning percentile (1-30)')
    parser.add_argument('--strategy', choices=[kind.value for kind in StrategyKind],
                        help='Zipf pruning strategy')
    parser.add_argument('--query', help='Free text query to search for')
    parser.add_argument('--top', type=int, help='Number of top results to display')
    parser.add_argument('--stats', action='store_true', help='Show index statistics')
    parser.add_argument('--config', help='Path to a JSON configuration file')
    parser.add_argument('--verbose', action='store_true', help='Show debug logging')
    parser.add_argument('--interactive', action='store_true', help='Run in interactive mode')
    args = parser.parse_args(argv)

    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        print(f"Error loading configuration: {e}")
        sys.exit(1)

    manager = IndexManager(config)
    top_k = args.top if args.top is not None else get_setting(config, "search.max_results")
    preview_length = get_setting(config, "search.preview_length")

    if args.index:
        if not manager.load(args.index):
            print(f"Failed to load index: {manager.last_error}")
            sys.exit(1)

    if args.documents:
        if not manager.build_index(args.documents, args.percentile, args.strategy):
            print(f"Failed to build index: {manager.last_error}")
            sys.exit(1)

    if manager.is_empty():
        print("No index available. Use --documents to build one or --index to load one.")
        sys.exit(1)

    if args.save:
        if not manager.save(args.save):
            print(f"Failed to save index: {manager.last_error}")
            sys.exit(1)
        print(f"Index saved to {args.save}")

    if args.stats:
        display_statistics(manager)

    # Interactive mode
    if args.interactive:
        print("\nZipfRetriever Interactive Mode")
        print("Type 'quit' to exit")

        while True:
            print("\n" + "=" * 60)
            query = input("\nEnter search query: ")

            if query.lower() == 'quit':
                break

            if not query.strip():
                print("Empty query. Please try again.")
                continue

            results = manager.search(query, top_k)
            display_results(results, preview_length)

    # Query mode
    elif args.query:
        results = manager.search(args.query, top_k)
        display_results(results, preview_length)


if __name__ == "__main__":
    main()
