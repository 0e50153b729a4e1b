#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""
ZipfRetriever - Interactive CLI Interface
A rich console front end for building, querying and persisting the index
"""

import os
import sys
import time
import argparse
from typing import List

# Add the project root directory to Python path
sys.path.insert(0, os.path.abspath(os.path.dirname(__file__)))

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn, BarColumn, TimeElapsedColumn
from rich import box

from ZipfRetriever.config import get_setting, load_config
from ZipfRetriever.errors import ConfigurationError
from ZipfRetriever.index_manager import IndexManager
from ZipfRetriever.log_setup import configure_logging
from ZipfRetriever.tfidf_search.vector_space import SearchResult
from ZipfRetriever.zipf import StrategyKind, strategy_descriptions

# Initialize rich console
console = Console()


class ZipfRetrieverCLI:
    def __init__(self, config=None):
        """Initialize the CLI interface"""
        self.config = config if config is not None else load_config()
        self.manager = IndexManager(self.config)

    def setting(self, key: str):
        return get_setting(self.config, key)

    def print_header(self):
        """Display the application header"""
        console.print(Panel(
            "[bold blue]ZipfRetriever[/bold blue] [yellow]Search Engine[/yellow]",
            border_style="blue",
            subtitle="TF-IDF search with Zipf vocabulary pruning",
            width=80
        ))

    def _progress(self) -> Progress:
        return Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TimeElapsedColumn(),
            console=console
        )

    def choose_strategy(self) -> str:
        """Show the pruning strategies and ask for one"""
        default = self.setting("zipf.default_strategy")
        table = Table(title="[bold]Zipf Strategies[/bold]", box=box.ROUNDED)
        table.add_column("#", style="dim")
        table.add_column("Strategy", style="cyan")
        table.add_column("Description", style="green")

        kinds = []
        for i, (kind, name, description) in enumerate(strategy_descriptions(), 1):
            kinds.append(kind)
            table.add_row(str(i), name, description)
        console.print(table)

        choice = console.input(f"[bold cyan]Select strategy number (default: {default}): [/bold cyan]")
        if choice.isdigit() and 1 <= int(choice) <= len(kinds):
            return kinds[int(choice) - 1]
        return default

    def build_index(self, directory: str = None, percentile: int = None, strategy: str = None) -> bool:
        """Build the index from a corpus directory"""
        directory = directory or self.setting("corpus.documents_dir")
        console.print(f"Building index from: [cyan]{directory}[/cyan]")

        with self._progress() as progress:
            task = progress.add_task("Indexing documents...", total=None)
            ok = self.manager.build_index(directory, percentile, strategy)
            progress.update(task, completed=True)

        if not ok:
            console.print(f"[bold red]Error building index:[/bold red] {self.manager.last_error}")
            return False

        stats = self.manager.stats()
        console.print(f"[green]Indexed [bold]{stats.document_count}[/bold] documents, "
                      f"[bold]{stats.term_count}[/bold] terms[/green]")
        return True

    def save_index(self, path: str = None) -> bool:
        path = path or self.setting("index.default_file")
        if self.manager.save(path):
            console.print(f"[green]Index saved to [cyan]{path}[/cyan][/green]")
            return True
        console.print(f"[bold red]Error saving index:[/bold red] {self.manager.last_error}")
        return False

    def load_index(self, path: str = None) -> bool:
        path = path or self.setting("index.default_file")
        console.print(f"Loading index from: [cyan]{path}[/cyan]")

        with self._progress() as progress:
            task = progress.add_task("Loading index...", total=None)
            ok = self.manager.load(path)
            progress.update(task, completed=True)

        if not ok:
            console.print(f"[bold red]Error loading index:[/bold red] {self.manager.last_error}")
            return False

        stats = self.manager.stats()
        console.print(f"[green]Loaded [bold]{stats.document_count}[/bold] documents, "
                      f"[bold]{stats.term_count}[/bold] terms[/green]")
        return True

    def search(self, query: str, top_k: int) -> List[SearchResult]:
        """Perform a TF-IDF search"""
        if self.manager.is_empty():
            console.print("[bold red]The index is empty. Build or load one first.[/bold red]")
            return []

        console.print(f"Executing TF-IDF search: '[cyan]{query}[/cyan]'")

        start_time = time.time()
        results = self.manager.search(query, top_k)
        execution_time = time.time() - start_time

        console.print(f"[green]Found {len(results)} documents in {execution_time:.6f} seconds[/green]")
        return results

    def display_results(self, results: List[SearchResult]):
        """Display search results in a formatted way"""
        if not results:
            console.print("[yellow]No results found.[/yellow]")
            return

        preview_length = self.setting("search.preview_length")
        timestamp = time.strftime("%H:%M:%S")
        console.print(f"\n[bold cyan]📊 SEARCH RESULTS [dim]({timestamp})[/dim]:[/bold cyan]")

        table = Table(
            box=box.HEAVY_EDGE,
            show_header=True,
            header_style="bold magenta",
            title=f"[bold]Found {len(results)} document(s) ranked by relevance[/bold]",
            title_style="yellow"
        )

        table.add_column("📌", style="dim", width=4)
        table.add_column("📑 File", style="cyan bold")
        table.add_column("🔢 Score", style="yellow", width=10)
        table.add_column("📝 Content", style="green", no_wrap=False)

        for i, (doc, score) in enumerate(results):
            content_snippet = " ".join(doc.raw_text.split())[:preview_length]
            if len(content_snippet) == preview_length:
                content_snippet += "..."

            # Highlight the row for the top result
            row_style = "on blue" if i == 0 else ""

            score_str = f"{score:.4f}"
            if score > 0.7:
                score_display = f"[bold green]{score_str}[/bold green]"
            elif score > 0.4:
                score_display = f"[yellow]{score_str}[/yellow]"
            else:
                score_display = f"[dim]{score_str}[/dim]"

            table.add_row(
                str(i+1),
                doc.file_name or f"[dim]<document {doc.id}>[/dim]",
                score_display,
                content_snippet,
                style=row_style
            )

        console.print(table)
        console.print("[dim]Tip: Higher scores indicate more relevant results.[/dim]")

    def show_statistics(self):
        stats = self.manager.stats()

        table = Table(title="[bold]Index Statistics[/bold]", box=box.ROUNDED, show_header=False)
        table.add_column("Metric", style="cyan")
        table.add_column("Value", style="yellow")

        table.add_row("Documents", str(stats.document_count))
        table.add_row("Terms", str(stats.term_count))
        table.add_row("Zipf applied", "yes" if stats.zipf_applied else "no")
        if stats.zipf_applied:
            table.add_row("Zipf strategy", f"{stats.strategy} ({stats.percentile}%)")
        table.add_row("Vector sorted", "yes" if stats.is_sorted else "no")
        table.add_row("Avg terms per document", f"{stats.average_terms_per_document:.2f}")
        table.add_row("Estimated memory", f"{stats.estimated_memory_kb} KB")
        table.add_row("Corpus directory", self.manager.current_directory or "[dim]-[/dim]")

        console.print(table)

    def show_validation(self):
        result = self.manager.validate()
        status = "[bold green]VALID[/bold green]" if result.is_valid else "[bold red]INVALID[/bold red]"

        def check(flag):
            return "✅" if flag else "❌"

        console.print(Panel(
            f"Index: {status}\n"
            f"{check(result.index_not_empty)} Index not empty\n"
            f"{check(result.vector_sorted)} Term vector sorted\n"
            f"{check(result.structures_consistent)} Structures consistent\n\n"
            f"[dim]{result.message}[/dim]",
            title="[bold]🔍 Validation[/bold]",
            border_style="green" if result.is_valid else "red",
            expand=False,
            padding=(1, 2)
        ))

    def interactive_mode(self):
        """Run the interactive menu"""
        while True:
            menu_table = Table(show_header=False, box=box.SIMPLE)
            menu_table.add_column("Option", style="dim")
            menu_table.add_column("Description", style="yellow")

            menu_table.add_row("1", "Build Index")
            menu_table.add_row("2", "Search")
            menu_table.add_row("3", "Save Index")
            menu_table.add_row("4", "Load Index")
            menu_table.add_row("5", "Show Statistics")
            menu_table.add_row("6", "Validate Index")
            menu_table.add_row("7", "Quit")

            console.print("\n[bold cyan]Available Actions:[/bold cyan]")
            console.print(menu_table)

            choice = console.input("\n[bold cyan]Enter choice (1-7): [/bold cyan]")

            if choice == '7' or choice.lower() == 'quit':
                break

            if choice == '1':
                default_dir = self.setting("corpus.documents_dir")
                directory = console.input(f"Corpus directory (default: {default_dir}): ") or default_dir

                default_percentile = self.setting("zipf.default_percentile")
                percentile = default_percentile
                try:
                    percentile_input = console.input(f"Zipf percentile (default: {default_percentile}): ")
                    if percentile_input:
                        percentile = int(percentile_input)
                except ValueError:
                    console.print(f"[yellow]Invalid number. Using default: {default_percentile}[/yellow]")

                self.build_index(directory, percentile, self.choose_strategy())

            elif choice == '2':
                query = console.input("\nEnter search query: ")
                if not query.strip():
                    console.print("[bold red]Empty query. Please try again.[/bold red]")
                    continue

                top_k = self.setting("search.max_results")
                try:
                    top_k_input = console.input(f"Number of results to show (default: {top_k}): ")
                    if top_k_input:
                        top_k = int(top_k_input)
                except ValueError:
                    console.print(f"[yellow]Invalid number. Using default: {top_k}[/yellow]")

                self.display_results(self.search(query, top_k))

            elif choice == '3':
                default_file = self.setting("index.default_file")
                self.save_index(console.input(f"Index file (default: {default_file}): ") or default_file)

            elif choice == '4':
                default_file = self.setting("index.default_file")
                self.load_index(console.input(f"Index file (default: {default_file}): ") or default_file)

            elif choice == '5':
                self.show_statistics()

            elif choice == '6':
                self.show_validation()

            else:
                console.print("[bold red]Invalid choice. Please enter a number between 1 and 7.[/bold red]")


def main():
    """Main entry point for the CLI application"""
    parser = argparse.ArgumentParser(
        description='ZipfRetriever - Interactive TF-IDF Search Console'
    )
    parser.add_argument('--documents', help='Directory with the .txt corpus to index')
    parser.add_argument('--index', help='Load a previously saved binary index')
    parser.add_argument('--percentile', type=int, help='Zipf pruning percentile (1-30)')
    parser.add_argument('--strategy', choices=[kind.value for kind in StrategyKind],
                        help='Zipf pruning strategy')
    parser.add_argument('--query', help='Query string to search for')
    parser.add_argument('--top', type=int, help='Number of top results to display')
    parser.add_argument('--config', help='Path to a JSON configuration file')
    parser.add_argument('--verbose', action='store_true', help='Show debug logging')
    parser.add_argument('--interactive', action='store_true',
                        help='Run in interactive mode')
    args = parser.parse_args()

    configure_logging("DEBUG" if args.verbose else "WARNING", console=console)

    try:
        config = load_config(args.config)
    except ConfigurationError as e:
        console.print(f"[bold red]Error loading configuration:[/bold red] {e}")
        sys.exit(1)

    retriever = ZipfRetrieverCLI(config)

    # Display a fancy startup banner
    console.print("\n")
    console.rule("[bold blue]✦ ✦ ✦ ZipfRetriever System ✦ ✦ ✦[/bold blue]", style="blue")
    retriever.print_header()
    console.rule(style="blue")

    if args.index and not retriever.load_index(args.index):
        sys.exit(1)

    if args.documents and not retriever.build_index(args.documents, args.percentile, args.strategy):
        sys.exit(1)

    # Run in interactive mode if specified or if no query is provided
    if args.interactive or not args.query:
        retriever.interactive_mode()
        return

    top_k = args.top if args.top is not None else retriever.setting("search.max_results")
    console.rule("[bold yellow]TF-IDF Query Search[/bold yellow]", style="yellow")
    retriever.display_results(retriever.search(args.query, top_k))


if __name__ == "__main__":
    main()
