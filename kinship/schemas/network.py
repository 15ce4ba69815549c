from typing import Dict, List
from pydantic import BaseModel
from .friends import FriendOut

class IntroductionChainOut(BaseModel):
    introducer: FriendOut
    introduced: List[FriendOut]

class NeighborhoodOut(BaseModel):
    neighborhood: str
    count: int
    friends: List[FriendOut]

class LocationClusterOut(BaseModel):
    city: str
    total_friends: int
    neighborhoods: List[NeighborhoodOut]

class NetworkOut(BaseModel):
    levels: Dict[str, int]
    introduction_chains: List[IntroductionChainOut]
    location_clusters: List[LocationClusterOut]

class NameGameRoundOut(BaseModel):
    friend_id: int
    photo: str
    options: List[str]
    answer: str
