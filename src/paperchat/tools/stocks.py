"""
Stock tools. The model supplies the figures; the tools only render them.
"""

from pydantic import BaseModel, Field

from ..models.ui import BotCard, StockCard, StockList, StockQuote
from .registry import ToolContext, ToolRegistry


class StockPriceArgs(BaseModel):
    symbol: str = Field(..., description="The name or symbol of the stock or currency, e.g. DOGE/AAPL/USD")
    price: float = Field(..., description="The price of the stock")
    delta: float = Field(..., description="The change in price of the stock")


class ListStocksArgs(BaseModel):
    stocks: list[StockQuote] = Field(..., description="Trending stocks with their price and change")


def register_stock_tools(registry: ToolRegistry) -> None:

    @registry.tool(
        "show_stock_price",
        "Get the current stock price of a given stock or currency.",
        StockPriceArgs,
    )
    async def show_stock_price(args: StockPriceArgs, ctx: ToolContext):
        card = BotCard(child=StockCard(quote=StockQuote(**args.model_dump())))
        yield card
        ctx.record("show_stock_price", args.model_dump(), args.model_dump())
        yield card

    @registry.renderer("show_stock_price")
    def render_stock_price(result):
        return BotCard(child=StockCard(quote=StockQuote.model_validate(result)))

    @registry.tool(
        "list_stocks",
        "List three imaginary stocks that are trending.",
        ListStocksArgs,
    )
    async def list_stocks(args: ListStocksArgs, ctx: ToolContext):
        card = BotCard(child=StockList(quotes=args.stocks))
        yield card
        ctx.record("list_stocks", args.model_dump(), args.model_dump())
        yield card

    @registry.renderer("list_stocks")
    def render_list_stocks(result):
        quotes = [StockQuote.model_validate(item) for item in result.get("stocks", [])]
        return BotCard(child=StockList(quotes=quotes))
