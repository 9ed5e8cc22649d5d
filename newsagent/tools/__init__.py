"""Tools available to the newsletter agent."""
