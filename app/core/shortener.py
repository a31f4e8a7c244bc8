# app/core/shortener.py
"""
Utilitários de códigos curtos: geração aleatória, validação de formato e
montagem do endereço público.
"""

# ========================
# --- Importações ---
# ========================
import random
import string
from urllib.parse import quote

# ========================
# --- Constantes ---
# ========================
ALPHABET = string.ascii_letters + string.digits
SHORT_CODE_LENGTH = 6
# Caminhos fixos da API que também têm o formato de um código curto
RESERVED_CODES = frozenset({"health"})

# ========================
# --- Funções ---
# ========================
def generate_short_code(length: int = SHORT_CODE_LENGTH) -> str:
    """
    Gera um código aleatório de `length` caracteres alfanuméricos.

    Usa o gerador não criptográfico do módulo `random`: o código identifica
    uma URL pública e não é um segredo. Nenhuma checagem de unicidade é feita
    aqui; colisões são detectadas pela constraint UNIQUE do banco.
    """
    while True:
        code = "".join(random.choices(ALPHABET, k=length))
        if code not in RESERVED_CODES:
            return code

def is_valid_short_code(code: str) -> bool:
    """Verifica se `code` tem exatamente o formato de um código gerado."""
    return len(code) == SHORT_CODE_LENGTH and all(char in ALPHABET for char in code)

def build_short_url(domain: str, short_code: str) -> str:
    """Monta o endereço público `https://{domain}/{short_code}`."""
    return f"https://{domain}/{short_code}"

def _is_header_safe(char: str) -> bool:
    # Caracteres visíveis ASCII e Latin-1 (sem os controles C0, DEL e C1)
    code_point = ord(char)
    return 0x20 <= code_point < 0x7F or 0xA0 <= code_point <= 0xFF

def to_location_header(url: str) -> str:
    """
    Prepara a URL original para o header `Location` sem normalizá-la.

    Apenas caracteres que um header HTTP não consegue transportar (controles
    e pontos de código acima de Latin-1) são codificados em percent-encoding
    UTF-8, assim como espaços nas extremidades. O restante segue intacto.
    """
    encoded = [char if _is_header_safe(char) else quote(char, safe="") for char in url]
    if encoded and encoded[0] == " ":
        encoded[0] = "%20"
    if encoded and encoded[-1] == " ":
        encoded[-1] = "%20"
    return "".join(encoded)
