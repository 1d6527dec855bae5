"""Application configuration loaded from environment variables."""
import os
from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings

from ordering.pricing import PriceList


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Database path
    data_path: str = os.getenv("DATA_PATH", os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__)))))

    @property
    def db_path(self) -> str:
        return os.path.join(self.data_path, "orders.db")

    # API configuration
    api_host: str = "127.0.0.1"
    api_port: int = 8082
    log_level: str = "INFO"

    # CORS
    cors_origins: list[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Live feed
    feed_history: int = 100

    # Prices in shillings
    price_standalone_rice: int = 3000
    price_fried_snack_plain: int = 2000
    price_fried_snack_egg: int = 3000
    price_fried_snack_poultry: int = 5000
    price_premium: int = 5000
    price_premium_side: int = 5000
    price_starch_poultry: Optional[int] = None
    price_combination: int = 3000
    delivery_fee: int = 1000

    export_title: str = "Food Orders"

    class Config:
        env_prefix = "FOOD_ORDER_"

    def price_list(self) -> PriceList:
        return PriceList(
            standalone_rice=self.price_standalone_rice,
            fried_snack_plain=self.price_fried_snack_plain,
            fried_snack_egg=self.price_fried_snack_egg,
            fried_snack_poultry=self.price_fried_snack_poultry,
            premium=self.price_premium,
            premium_side=self.price_premium_side,
            starch_poultry=self.price_starch_poultry,
            combination=self.price_combination,
            delivery_fee=self.delivery_fee,
        )


@lru_cache
def get_settings() -> Settings:
    return Settings()
