# cotizaobra/core/strings.py
"""
Texter per språk (es/en) för utskriftsvyn, API-svar och AI-beskrivningen.
"""
from __future__ import annotations

from typing import Dict, Union

from cotizaobra.core.quote import Language

STRINGS: Dict[Language, Dict[str, str]] = {
    Language.ES: {
        "title": "Cotización",
        "quote_for": "Cotización para",
        "project_name": "Nombre del proyecto",
        "client_name": "Nombre del cliente",
        "address": "Dirección",
        "submission_deadline": "Fecha límite de entrega",
        "project_description": "Descripción del proyecto",
        "items": "Partidas",
        "description": "Descripción",
        "quantity": "Cantidad",
        "unit": "Unidad",
        "material": "Material",
        "unit_price": "Precio unitario",
        "labor": "Mano de obra",
        "total": "Total",
        "subtotal": "Subtotal",
        "tax": "IVA",
        "grand_total": "Total general",
        "currency": "Moneda",
        "default_unit": "unidad",
        "prompt_placeholder": "Ej: Piso para 2000 pies², 15 escalones, 2 descansos...",
        "error_unconfigured": "Error: la clave de API del servicio de generación no está configurada.",
        "error_service": "Ocurrió un error al generar la descripción.",
    },
    Language.EN: {
        "title": "Quote",
        "quote_for": "Quote for",
        "project_name": "Project name",
        "client_name": "Client name",
        "address": "Address",
        "submission_deadline": "Submission deadline",
        "project_description": "Project description",
        "items": "Items",
        "description": "Description",
        "quantity": "Quantity",
        "unit": "Unit",
        "material": "Material",
        "unit_price": "Unit price",
        "labor": "Labor",
        "total": "Total",
        "subtotal": "Subtotal",
        "tax": "Tax",
        "grand_total": "Grand total",
        "currency": "Currency",
        "default_unit": "unit",
        "prompt_placeholder": "e.g., Flooring for 2000 sq ft, 15 steps, 2 landings...",
        "error_unconfigured": "Error: the API key for the text generation service is not configured.",
        "error_service": "An error occurred while generating the description.",
    },
}


def strings_for(language: Union[Language, str]) -> Dict[str, str]:
    """Texttabellen för språket. Okänt språk -> ValueError."""
    return STRINGS[Language(language)]
