"""Built-in ifirma mapping tables (invoice, send-invoice, response envelope)."""
from ifirma_client.transformer.registry import format_date, percent_to_decimal, strip_spaces

from .mapping import FieldMap, ValueMap, enum


ATTRIBUTES_MAP = FieldMap(
    wire_name=None,
    children={
        "paid": "Zaplacono",
        "type": "LiczOd",
        "account_no": "NumerKontaBankowego",
        "issue_date": "DataWystawienia",
        "sale_date": "DataSprzedazy",
        "sale_date_format": "FormatDatySprzedazy",
        "due_date": "TerminPlatnosci",
        "payment_type": "SposobZaplaty",
        "designation_type": "RodzajPodpisuOdbiorcy",
        "gios": "WidocznyNumerGios",
        "number": "Numer",
        "full_number": "PelnyNumer",
        "customer_id": "IdentyfikatorKontrahenta",
        "customer_nip": "NIPKontrahenta",
        "customer": FieldMap(
            wire_name="Kontrahent",
            children={
                "id": "Identyfikator",
                "name": "Nazwa",
                "nip": "NIP",
                "street": "Ulica",
                "country": "Kraj",
                "zipcode": "KodPocztowy",
                "city": "Miejscowosc",
                "email": "Email",
                "phone": "Telefon",
                "eu_prefix": "PrefiksUE",
                "natural_person": "OsobaFizyczna",
            },
        ),
        "items": FieldMap(
            wire_name="Pozycje",
            children={
                "vat_rate": "StawkaVat",
                "quantity": "Ilosc",
                "price": "CenaJednostkowa",
                "name": "NazwaPelna",
                "unit": "Jednostka",
                "vat_type": "TypStawkiVat",
                "pkwiu": "PKWiU",
            },
        ),
    },
)

VALUE_MAP = ValueMap(
    children={
        "issue_date": format_date,
        "sale_date": format_date,
        "due_date": format_date,
        "account_no": strip_spaces,
        "type": enum(net="NET", gross="BRT"),
        "payment_type": enum(wire="PRZ", cash="GTK", offset="KOM", on_delivery="POB"),
        "sale_date_format": enum(daily="DZN", monthly="MSC"),
        "items": ValueMap(
            children={
                "vat_type": enum(percent="PRC", exempt="ZW"),
                "vat_rate": percent_to_decimal,
            }
        ),
    }
)

# Options of the "send invoice by e-mail" request
SEND_ATTRIBUTES_MAP = FieldMap(
    wire_name=None,
    children={
        "text": "Tekst",
        "wire_transfer": "Przelew",
        "on_delivery": "Pobranie",
        "mtransfer": "MTransfer",
    },
)

SEND_DEFAULTS = {
    "text": "Tresc wiadomosci",
    "wire_transfer": True,
    "on_delivery": True,
    "mtransfer": "mtransfer",
}

# Status fields every ifirma response carries next to the invoice fields
RESPONSE_MAP = FieldMap(
    wire_name=None,
    children={
        "code": "Kod",
        "info": "Informacja",
        "invoice_id": "Identyfikator",
    },
)
