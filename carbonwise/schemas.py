# carbonwise/schemas.py
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

# Upper bound keeps every annualised category finite
MAX_INPUT = 1e9
NonNegative = Annotated[float, Field(ge=0, le=MAX_INPUT, allow_inf_nan=False)]


class Transport(BaseModel):
    carKm: NonNegative = 0.0            # km per week
    flightHours: NonNegative = 0.0      # hours per year
    publicTransport: NonNegative = 0.0  # km per week


class Home(BaseModel):
    electricity: NonNegative = 0.0  # kWh per month
    gas: NonNegative = 0.0          # therms per month
    heating: Optional[str] = None


class Diet(BaseModel):
    type: str = "mixed"
    meatServings: NonNegative = 0.0  # per week


class Shopping(BaseModel):
    clothing: NonNegative = 0.0     # $ per year
    electronics: NonNegative = 0.0  # $ per year


class LifestyleInput(BaseModel):
    transport: Transport = Field(default_factory=Transport)
    home: Home = Field(default_factory=Home)
    diet: Diet = Field(default_factory=Diet)
    shopping: Shopping = Field(default_factory=Shopping)


class EmissionsBreakdown(BaseModel):
    model_config = ConfigDict(frozen=True)

    transport: int
    home: int
    diet: int
    shopping: int
    total: int

    def categories(self) -> Dict[str, int]:
        return {
            "transport": self.transport,
            "home": self.home,
            "diet": self.diet,
            "shopping": self.shopping,
        }


class Recommendation(BaseModel):
    category: str
    title: str
    impact: int
    difficulty: Literal["easy", "medium", "hard"]
    confidence: float
    description: str
    action: str
    source: Literal["threshold", "similar_profile"] = "threshold"


class Prediction(BaseModel):
    month: int
    predicted: int
    confidence: float


class Anomaly(BaseModel):
    field: str
    message: str
    severity: Literal["high", "medium"]


class Session(BaseModel):
    sessionId: str
    userId: Optional[str] = None
    data: Any = None
    timestamp: str


# ---- Request bodies ---------------------------------------------------------
class ChatRequest(BaseModel):
    message: str
    context: Optional[Dict[str, Any]] = None


class ExplainRequest(BaseModel):
    category: Literal["transport", "home", "diet", "shopping"]
    value: NonNegative
    context: Optional[Dict[str, Any]] = None


class FootprintAdviceRequest(BaseModel):
    context: Dict[str, Any]


class SaveSessionRequest(BaseModel):
    userId: Optional[Union[str, int]] = None
    data: Any = None

    def user_key(self) -> Optional[str]:
        return None if self.userId is None else str(self.userId)


class CalculationResult(BaseModel):
    success: bool = True
    emissions: EmissionsBreakdown
    recommendations: List[Recommendation]
    predictions: List[Prediction]
    worldAverage: int
    comparison: int
    impactLevel: str
    formatted: str
