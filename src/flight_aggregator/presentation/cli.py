"""
Interface de linha de comando
"""
import argparse
import asyncio
import logging
from typing import List, Optional

from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from ..application.services import FlightSearchService
from ..domain.deadline import Deadline
from ..domain.errors import FlightSearchError
from ..domain.models import SearchMetadata, SearchRequest, SearchResponse, SortOption
from ..infrastructure.config import Config
from ..infrastructure.factory import FlightSearchServiceFactory


def configure_logging(level: str, console: Optional[Console] = None) -> None:
    """Logging do processo via rich"""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
        force=True,
    )


class FlightAggregatorCLI:
    """Interface CLI para o agregador de voos"""

    def __init__(
        self,
        console: Optional[Console] = None,
        search_service: Optional[FlightSearchService] = None,
        config: Optional[Config] = None,
    ):
        self.console = console or Console()
        self.config = config or Config()
        self._search_service = search_service

    @property
    def search_service(self) -> FlightSearchService:
        if self._search_service is None:
            self._search_service = FlightSearchServiceFactory.create(self.config)
        return self._search_service

    def run(self, argv: Optional[List[str]] = None) -> int:
        """Executa a interface CLI; retorna o código de saída"""
        args = self.parse_arguments(argv)
        configure_logging("DEBUG" if args.verbose else self.config.LOG_LEVEL, self.console)

        try:
            request = self.build_search_request(args)
        except ValidationError as e:
            self.console.print(Panel.fit(f"[red]{e}[/red]", title="Parâmetros inválidos", border_style="red"))
            return 2
        timeout = args.timeout if args.timeout is not None else self.config.SEARCH_TIMEOUT

        # Repetir a mesma busca demonstra o cache
        for _ in range(max(1, args.repeat)):
            try:
                response = asyncio.run(self.search_service.search(request, Deadline.after(timeout)))
            except FlightSearchError as e:
                self._display_error(e)
                return 1

            if args.json:
                self.console.print_json(response.model_dump_json())
            else:
                self._display_results(response, args.limit)
        return 0

    def parse_arguments(self, argv: Optional[List[str]] = None) -> argparse.Namespace:
        """Configura e processa argumentos da linha de comando"""
        parser = argparse.ArgumentParser(
            prog="flight-aggregator",
            description="Agregador de ofertas de voo de múltiplos provedores",
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Exemplos de uso:
  flight-aggregator --origin CGK --destination DPS --date 2025-12-15
  flight-aggregator --origin CGK --destination DPS --date 2025-12-15 --max-stops 0 --sort-by price_asc
  flight-aggregator --origin CGK --destination DPS --date 2025-12-15 --airline "Garuda Indonesia" --repeat 2
            """
        )

        # Argumentos obrigatórios
        parser.add_argument("--origin", required=True, help="Código IATA origem")
        parser.add_argument("--destination", required=True, help="Código IATA destino")
        parser.add_argument("--date", required=True, dest="departure_date",
                            help="Data partida YYYY-MM-DD")

        # Argumentos opcionais
        parser.add_argument("--return", dest="return_date",
                            help="Data retorno YYYY-MM-DD")
        parser.add_argument("--passengers", type=int, default=1,
                            help="Número de passageiros (padrão: 1)")
        parser.add_argument("--cabin", default="economy",
                            help="Classe de cabine (padrão: economy)")

        # Filtros
        parser.add_argument("--min-price", type=int, help="Preço mínimo")
        parser.add_argument("--max-price", type=int, help="Preço máximo")
        parser.add_argument("--min-stops", type=int, help="Número mínimo de paradas")
        parser.add_argument("--max-stops", type=int, help="Número máximo de paradas")
        parser.add_argument("--depart-after", help="Partida a partir de HH:MM")
        parser.add_argument("--depart-before", help="Partida até HH:MM")
        parser.add_argument("--arrive-after", help="Chegada a partir de HH:MM")
        parser.add_argument("--arrive-before", help="Chegada até HH:MM")
        parser.add_argument("--airline", action="append", dest="airlines",
                            help="Companhia (nome ou código); pode repetir")
        parser.add_argument("--min-duration", type=int, help="Duração mínima em minutos")
        parser.add_argument("--max-duration", type=int, help="Duração máxima em minutos")
        parser.add_argument("--sort-by", choices=[option.value for option in SortOption],
                            help="Ordenação explícita (padrão: melhor custo-benefício)")

        # Execução e saída
        parser.add_argument("--timeout", type=float,
                            help="Prazo da busca em segundos")
        parser.add_argument("--repeat", type=int, default=1,
                            help="Repete a mesma busca N vezes (demonstra o cache)")
        parser.add_argument("--json", action="store_true",
                            help="Imprime a resposta em JSON")
        parser.add_argument("--limit", type=int, default=20,
                            help="Limite de ofertas exibidas (padrão: 20)")
        parser.add_argument("--verbose", action="store_true",
                            help="Logging em nível DEBUG")

        return parser.parse_args(argv)

    def build_search_request(self, args: argparse.Namespace) -> SearchRequest:
        """Constrói a requisição a partir dos argumentos"""
        return SearchRequest(
            origin=args.origin.upper(),
            destination=args.destination.upper(),
            departure_date=args.departure_date,
            return_date=args.return_date,
            passengers=args.passengers,
            cabin_class=args.cabin,
            min_price=args.min_price,
            max_price=args.max_price,
            min_stops=args.min_stops,
            max_stops=args.max_stops,
            departure_time_start=args.depart_after,
            departure_time_end=args.depart_before,
            arrival_time_start=args.arrive_after,
            arrival_time_end=args.arrive_before,
            airlines=args.airlines,
            min_duration_minutes=args.min_duration,
            max_duration_minutes=args.max_duration,
            sort_by=args.sort_by,
        )

    def _display_results(self, response: SearchResponse, limit: int) -> None:
        """Exibe resultados da busca"""
        if not response.flights:
            self.console.print(
                Panel.fit(
                    "[yellow]Nenhuma oferta encontrada dentro dos critérios especificados.[/yellow]",
                    title="Sem Resultados",
                    border_style="yellow"
                )
            )
        else:
            limited = response.flights[:limit]
            table = Table(
                show_lines=True,
                title=f"🛫 Ofertas ({len(limited)} de {response.metadata.total_results})",
            )
            table.add_column("#", justify="right")
            table.add_column("Voo", style="bold cyan")
            table.add_column("Companhia")
            table.add_column("Rota", style="yellow")
            table.add_column("Partida")
            table.add_column("Chegada")
            table.add_column("Duração", justify="right")
            table.add_column("Paradas", justify="center")
            table.add_column("Preço", style="bold green", justify="right")
            table.add_column("Provedor")

            for index, offer in enumerate(limited, start=1):
                table.add_row(
                    str(index),
                    offer.flight_number,
                    f"{offer.airline.name} ({offer.airline.code})",
                    offer.route_summary,
                    offer.departure.clock_time,
                    offer.arrival.clock_time,
                    offer.duration.formatted or "-",
                    str(offer.stops),
                    f"{offer.price.currency} {offer.price.amount:,}",
                    offer.provider,
                )
            self.console.print(table)

        self._display_metadata(response.metadata, response.cheapest_offer)

    def _display_metadata(self, metadata: SearchMetadata, cheapest=None) -> None:
        lines = [
            f"• Total encontrado: {metadata.total_results} ofertas",
            f"• Provedores: {metadata.providers_succeeded}/{metadata.providers_queried} ok, "
            f"{metadata.providers_failed} falha(s)",
            f"• Tempo de busca: {metadata.search_time_ms} ms",
            f"• Cache: {'hit' if metadata.cache_hit else 'miss'}",
        ]
        if cheapest is not None:
            lines.append(
                f"• Mais barato: {cheapest.flight_number} {cheapest.price.currency} {cheapest.price.amount:,}"
            )
        self.console.print(Panel.fit("\n".join(lines), title="Resumo", border_style="blue"))

    def _display_error(self, error: FlightSearchError) -> None:
        self.console.print(
            Panel.fit(f"[red]{error}[/red]", title=type(error).__name__, border_style="red")
        )
        self._display_metadata(error.metadata)


def main(argv: Optional[List[str]] = None) -> int:
    """Função principal"""
    cli = FlightAggregatorCLI()
    return cli.run(argv)


if __name__ == "__main__":
    raise SystemExit(main())
