from .user import (
	UserBase,
	UserCreate,
	UserRoleUpdate,
	UserProfileUpdate,
	UserResponse,
	UserSummaryResponse,
	UserLogin,
	TokenResponse,
)
from .category import (
	CategoryCreate,
	CategoryUpdate,
	CategoryResponse,
	CategoryWithChannelsResponse,
	CategoryListResponse,
	CategoryReorderRequest,
	CategoryToggleResponse,
	ChannelCreate,
	ChannelUpdate,
	ChannelResponse,
	ChannelListResponse,
	ChannelReorderRequest,
	ReorderResponse,
)
from .post import (
	PostCreate,
	PostResponse,
	PostListResponse,
	LikeResponse,
	CommentCreate,
	CommentResponse,
	CommentListResponse,
	MessageResponse,
)
from .search import (
	ChannelSearchResult,
	SearchResponse,
	PostSearchResponse,
)

__all__ = [
	# User
	"UserBase",
	"UserCreate",
	"UserRoleUpdate",
	"UserProfileUpdate",
	"UserResponse",
	"UserSummaryResponse",
	"UserLogin",
	"TokenResponse",
	# Category / Channel
	"CategoryCreate",
	"CategoryUpdate",
	"CategoryResponse",
	"CategoryWithChannelsResponse",
	"CategoryListResponse",
	"CategoryReorderRequest",
	"CategoryToggleResponse",
	"ChannelCreate",
	"ChannelUpdate",
	"ChannelResponse",
	"ChannelListResponse",
	"ChannelReorderRequest",
	"ReorderResponse",
	# Post / Comment / Like
	"PostCreate",
	"PostResponse",
	"PostListResponse",
	"LikeResponse",
	"CommentCreate",
	"CommentResponse",
	"CommentListResponse",
	"MessageResponse",
	# Search
	"ChannelSearchResult",
	"SearchResponse",
	"PostSearchResponse",
]
