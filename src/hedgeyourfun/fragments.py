"""htmx response fragments. Upstream strings (chain names) are escaped."""

from html import escape

from hedgeyourfun.wallets.resolver import AssetPosition

CALCULATOR_FORM = """<form hx-post="/calculator" hx-target="#bet-return">
  <label for="money">Stake (USD)</label>
  <input id="money" name="money" type="number" min="0" step="0.01" required>
  <button type="submit">Calculate</button>
</form>
<div id="bet-return"></div>"""


def exchange_rate(sol: str, usd: str, rate: str) -> str:
    """Single-wallet summary: SOL balance, its USD value and the rate used."""
    return (
        '<div class="exchange-rate">'
        f"<p>Balance: {escape(sol)} SOL</p>"
        f"<p>Value: ${escape(usd)}</p>"
        f"<p>SOL/USD: ${escape(rate)}</p>"
        "</div>"
    )


def account_assets(rows: list[AssetPosition]) -> str:
    """Asset table, one <tr> per position, in resolver order."""
    body = "".join(
        "<tr>"
        f"<td>{escape(row.asset_label)}</td>"
        f"<td>{escape(row.native_balance)}</td>"
        f"<td>{escape(row.usd_value)}</td>"
        "</tr>"
        for row in rows
    )
    return (
        '<table class="assets">'
        "<thead><tr><th>Asset</th><th>Balance</th><th>Value</th></tr></thead>"
        f"<tbody>{body}</tbody>"
        "</table>"
    )


def error_message(message: str) -> str:
    return f'<div class="error">{escape(message)}</div>'
