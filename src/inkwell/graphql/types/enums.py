import strawberry

from inkwell import models

StoryAudience = strawberry.enum(models.StoryAudience, description="Who can read a published story")
StoryLicense = strawberry.enum(models.StoryLicense)
PublicationRole = strawberry.enum(models.PublicationRole)
InvitationStatus = strawberry.enum(models.InvitationStatus)
NotificationAction = strawberry.enum(models.NotificationAction)
