"""
CSV Export

Writes a period's transactions to a CSV file with Portuguese headers and
labels, ready to open in a spreadsheet app.
"""

import csv
import io
from collections.abc import Iterable
from pathlib import Path
from typing import Optional, Union

from pinee.config import get_settings
from pinee.models.transaction import DateRange, TransactionRecord


CSV_HEADER = [
    "Data",
    "Descrição",
    "Categoria",
    "Tipo",
    "Valor",
    "Status",
    "Recorrente",
    "Frequência",
    "Data de Criação",
]

STATUS_LABELS = {
    "paid": "Pago",
    "unpaid": "Não Pago",
    "received": "Recebido",
    "pending": "Pendente",
    "consolidated": "Consolidado",
    "invested": "Investido",
}

FREQUENCY_LABELS = {
    "monthly": "Mensal",
    "weekly": "Semanal",
    "yearly": "Anual",
}


class ExportError(Exception):
    """Base exception for export failures."""
    pass


class NoDataFoundError(ExportError):
    """The selected period has no transactions."""

    def __init__(self, message: str = "Nenhuma transação encontrada para o período selecionado"):
        super().__init__(message)


class ExportFileSystemError(ExportError):
    """The CSV file could not be written."""
    pass


def translate_status(status: str) -> str:
    return STATUS_LABELS.get(status, status.title())


def translate_frequency(frequency: str) -> str:
    return FREQUENCY_LABELS.get(frequency, frequency.title())


def type_label(record: TransactionRecord) -> str:
    """Follows the stored income flag, so investments read as Despesa."""
    return "Receita" if record.is_income else "Despesa"


def export_filename(date_range: DateRange) -> str:
    return f"PINEE_Transacoes_{date_range.start.isoformat()}_{date_range.end.isoformat()}.csv"


class CsvExporter:
    """
    Generates and saves transaction CSV files.

    Args:
        directory: Where files are written (default from settings)
    """

    def __init__(self, directory: Optional[Union[str, Path]] = None):
        self._directory = Path(directory or get_settings().app.export_directory)

    def generate_csv(self, records: Iterable[TransactionRecord]) -> str:
        """CSV text for the records, newest first."""
        rows = sorted(records, key=lambda r: r.date, reverse=True)

        buffer = io.StringIO()
        writer = csv.writer(buffer, lineterminator="\n")
        writer.writerow(CSV_HEADER)

        for record in rows:
            writer.writerow([
                record.date.strftime("%d/%m/%Y"),
                record.title or record.description or "-",
                record.category,
                type_label(record),
                f"{record.amount:.2f}",
                translate_status(record.status),
                "Sim" if record.is_recurring else "Não",
                translate_frequency(record.recurring_frequency or ""),
                record.created_at.strftime("%d/%m/%Y %H:%M") if record.created_at else "",
            ])

        return buffer.getvalue()

    def export(
        self,
        records: Iterable[TransactionRecord],
        date_range: DateRange,
    ) -> Path:
        """
        Write the CSV file for a period.

        Raises:
            NoDataFoundError: If there are no records
            ExportFileSystemError: If the file cannot be written
        """
        records = list(records)
        if not records:
            raise NoDataFoundError()

        content = self.generate_csv(records)
        file_path = self._directory / export_filename(date_range)

        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            file_path.write_text(content, encoding="utf-8")
        except OSError as e:
            raise ExportFileSystemError(f"Erro ao salvar arquivo no sistema: {e}")

        return file_path
